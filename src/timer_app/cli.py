"""Command-line interface for Timer Start."""

import logging
from datetime import datetime
from pathlib import Path

import fire
from dotenv import load_dotenv

from src.core.config import get_locale, get_prefer_24_hour_time, load_config, validate_config
from src.parsing.errors import TimerStartError
from src.parsing.matcher import parse_timer_start
from src.timing.timer_start import TimerStart

# Load .env file from project root
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

logger = logging.getLogger(__name__)

DEMO_EXAMPLES = [
    "5",
    "5h3m",
    "1h1h",
    "1.5 hours",
    "2 weeks and 3 days",
    "15:30",
    "5 pm",
    "noon",
    "midnight",
    "tomorrow at noon",
    "tomorrow 0730",
    "christmas at 8 am",
    "new year's eve 11:59 pm",
    "not a time",
]


def _text(value) -> str:
    # fire converts numeric arguments ("5") to numbers
    return value if isinstance(value, str) else str(value)


class TimerStartCLI:
    """Timer Start CLI commands."""

    def __init__(self, locale: str | None = None, prefer_24_hour: bool | None = None, verbose: bool = False):
        """
        Args:
            locale: Locale name such as en-US or de-DE (default: configured locale)
            prefer_24_hour: Read and print clock times as 24-hour times (default: configured value)
            verbose: Enable debug logging
        """
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

        self._locale = locale or get_locale()
        self._prefer_24_hour = get_prefer_24_hour_time() if prefer_24_hour is None else bool(prefer_24_hour)

    def parse(self, text) -> dict:
        """Parse a timer start and show its token and canonical form.

        Args:
            text: Timer start such as "5h3m" or "tomorrow at noon"
        """
        try:
            token = parse_timer_start(_text(text), self._locale, self._prefer_24_hour)
        except TimerStartError as e:
            return {"error": str(e)}

        return TimerStart(token=token, locale=self._locale, prefer_24_hour=self._prefer_24_hour).to_dict()

    def end_time(self, text, start: str | None = None) -> dict:
        """Resolve the end time of a timer started now (or at --start).

        Args:
            text: Timer start to resolve
            start: Start time in ISO format (default: now)
        """
        timer_start = TimerStart.from_string(_text(text), self._locale, self._prefer_24_hour)
        if timer_start is None:
            return {"error": f"Unrecognized timer start: {_text(text)!r}"}

        try:
            start_time = datetime.fromisoformat(start) if start else datetime.now()
        except ValueError:
            return {"error": f"Invalid start time: {start!r}"}

        try:
            end_time = timer_start.get_end_time(start_time)
        except TimerStartError as e:
            return {"error": str(e), "display": str(timer_start)}

        return {
            "display": str(timer_start),
            "start": start_time.isoformat(),
            "end": end_time.isoformat(),
        }

    def validate(self, *args, multi: bool = False) -> dict:
        """Check command-line timer arguments.

        Without --multi the arguments are joined with spaces and must form one
        timer start. With --multi every argument must be a timer start.

        Args:
            args: Timer start text
            multi: Treat each argument as a separate timer
        """
        values = [_text(arg) for arg in args]
        if not multi:
            values = [" ".join(values)]

        timer_starts = [TimerStart.from_string(value, self._locale, self._prefer_24_hour) for value in values]
        if not values or any(timer_start is None for timer_start in timer_starts):
            return {"result": False, "timeStrings": []}

        return {"result": True, "timeStrings": [str(timer_start) for timer_start in timer_starts]}

    def config(self) -> dict:
        """Show the current configuration and any problems with it."""
        config = load_config()
        return {"config": config, "errors": validate_config(config)}

    def demo(self, start: str | None = None) -> list[dict]:
        """Parse and resolve a set of example inputs.

        Args:
            start: Start time in ISO format (default: now)
        """
        results = []
        for example in DEMO_EXAMPLES:
            result = self.end_time(example, start)
            results.append({"query": example, **result})

        return results


def main() -> None:
    """Main entry point for the Timer Start CLI."""
    fire.Fire(TimerStartCLI)


if __name__ == "__main__":
    main()
