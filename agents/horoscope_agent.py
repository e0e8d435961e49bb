"""
Horoscope Agent

Generates a short daily fortune for a user from their birthdate using an
OpenAI chat-completion model. Results are cached per user per day, so a
user costs at most one completion per day no matter how often delivery
is attempted.
"""

import os
import time
import logging
import yaml
from typing import Dict, Any, Optional

from runtime.settings import today_string, DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "system prompts", "horoscope_agent.yaml")


class HoroscopeAgent:
    """
    Daily horoscope generator backed by OpenAI chat completions
    """

    def __init__(self, openai_client, cache_service, timezone: str = DEFAULT_TIMEZONE,
                 config_path: str = DEFAULT_CONFIG_PATH, model: Optional[str] = None):
        """Initialize the horoscope agent"""
        self.client = openai_client
        self.cache_service = cache_service
        self.timezone = timezone
        self.config = self._load_config(config_path)

        defaults = self._get_default_config()
        self.model_config = {**defaults['model_config'], **(self.config.get('model_config') or {})}
        self.agent_config = {**defaults['agent_config'], **(self.config.get('agent_config') or {})}

        self.model = model or self.model_config['model']
        self.max_tokens = self.model_config['max_tokens']
        self.system_prompt = self.config.get('system_prompt') or defaults['system_prompt']
        self.user_prompt = self.config.get('user_prompt') or defaults['user_prompt']

        logger.info(f"HoroscopeAgent initialized with {self.model} (tz={self.timezone})")

    def _load_config(self, config_path: str) -> Dict[str, Any]:
        """Load agent configuration from YAML file"""
        try:
            with open(config_path, 'r', encoding='utf-8') as file:
                config = yaml.safe_load(file) or {}
        except FileNotFoundError:
            logger.error(f"HOROSCOPE: Configuration file {config_path} not found. Using defaults.")
            return self._get_default_config()
        except yaml.YAMLError as e:
            logger.error(f"HOROSCOPE: Error parsing YAML configuration: {e}. Using defaults.")
            return self._get_default_config()
        except Exception as e:
            logger.error(f"HOROSCOPE: Unexpected error loading configuration: {e}. Using defaults.")
            return self._get_default_config()

        if not isinstance(config, dict):
            logger.error(f"HOROSCOPE: Configuration in {config_path} is not a mapping. Using defaults.")
            return self._get_default_config()

        logger.info(f"HOROSCOPE: Loaded configuration from {config_path}")
        return config

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration if YAML loading fails"""
        return {
            'system_prompt': (
                "You are a fortune teller who reads today's fortune from a person's date of birth.\n"
                "Give office workers a kind, positive fortune for today in exactly five sentences, "
                "written like a morning note to a coworker.\n"
                "Skip any greeting and start the fortune right away in the first sentence.\n"
                "End the last sentence with two emoji that match its mood.\n"
                "Do not mention zodiac signs.\n"
                "Do not mention the day of the week."
            ),
            'user_prompt': (
                "Today's date is {date}.\n"
                "The user's date of birth is {birthdate}.\n"
                "Tell me a kind and positive fortune for an office worker."
            ),
            'model_config': {
                'model': 'gpt-4',
                'max_tokens': 300
            },
            'agent_config': {
                'greeting': "*<@{user_id}>, here is your fortune for today* 🧙🪄",
                'heading': "🔮 *Today's fortune:*",
                'notification_text': "Here is your fortune for today!",
                'fallback_message': "Sorry, I couldn't fetch your fortune today. Please try again later."
            }
        }

    def build_messages(self, date_string: str, birthdate: str):
        """System and user messages for one completion request"""
        return [
            {"role": "system", "content": self.system_prompt.strip()},
            {"role": "user", "content": self.user_prompt.format(date=date_string, birthdate=birthdate).strip()},
        ]

    async def get_horoscope(self, user_id: str, birthdate: str) -> Optional[str]:
        """
        Get today's horoscope for a user

        Args:
            user_id: Slack user ID
            birthdate: Birthdate as entered in the user's profile

        Returns:
            The horoscope text, or None if generation failed (not cached)
        """
        date_string = today_string(self.timezone)

        cached = self.cache_service.get_horoscope(user_id, date_string)
        if cached is not None:
            logger.info(f"HOROSCOPE: cache hit for {user_id}:{date_string}")
            return cached

        try:
            start_time = time.time()
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=self.build_messages(date_string, birthdate),
                max_tokens=self.max_tokens,
            )
            content = response.choices[0].message.content
            horoscope = (content or "").strip()
            if not horoscope:
                logger.error(f"HOROSCOPE: empty completion for {user_id}")
                return None

            self.cache_service.store_horoscope(user_id, date_string, horoscope)
            logger.info(f"HOROSCOPE: generated for {user_id}:{date_string} in "
                        f"{int((time.time() - start_time) * 1000)} ms")
            return horoscope

        except Exception as e:
            logger.error(f"HOROSCOPE: error fetching horoscope from OpenAI for {user_id}: {e}")
            return None
