"""
Horoscope Message Formatter

Builds the Block Kit payload for the daily horoscope direct message.
"""

from typing import Dict, Any, List


class HoroscopeMessageFormatter:
    """Format horoscope text as Slack blocks"""

    @staticmethod
    def quote(text: str) -> str:
        """Prefix every line with '> ' so Slack renders it as a block quote"""
        return '\n'.join(f"> {line}" for line in text.split('\n'))

    @staticmethod
    def build_blocks(user_id: str, horoscope: str, greeting: str, heading: str) -> List[Dict[str, Any]]:
        """Greeting section, quoted horoscope section, divider"""
        return [
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"{greeting.format(user_id=user_id)}\n\n"
                }
            },
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"{heading}\n{HoroscopeMessageFormatter.quote(horoscope)}"
                }
            },
            {
                "type": "divider"
            }
        ]
