from typing import Any

from spotify_api.errors import UserAbort


def ask(question: Any) -> Any:
    """Run a questionary prompt; Ctrl-C (which questionary reports as None) means quit."""
    answer = question.ask()
    if answer is None:
        raise UserAbort()
    return answer
