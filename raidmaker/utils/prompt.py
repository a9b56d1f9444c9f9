"""
Interactive prompt utilities.

This module provides the yes/no and multiple-choice prompts used by the pipeline.
"""
import logging
from typing import Callable, Optional, Sequence, TypeVar

from raidmaker.core.exceptions import UserAbortedError
from raidmaker.utils.format import TermColors, colorize
from raidmaker.utils.i18n import translate

logger = logging.getLogger('raidmaker')

T = TypeVar("T")


class Prompter:
    """
    Ask the operator questions on the terminal.

    Prompts block until a valid answer is given; there is no timeout.
    """
    def __init__(
        self,
        assume_yes: bool = False,
        colored_output: bool = True,
        input_func: Optional[Callable[[str], str]] = None
    ):
        """
        Initialize the prompter.

        Args:
            assume_yes: Answer yes to every yes/no question without asking
            colored_output: Whether to use colored output in terminal
            input_func: Function used to read a line, defaults to input()
        """
        self.assume_yes = assume_yes
        self.colored_output = colored_output
        self.input_func = input_func or input

    def yes_no(self, message: str, default: bool = False) -> bool:
        """
        Ask a yes/no question.

        Args:
            message: Question to display
            default: Answer used when the operator just presses enter

        Returns:
            True for yes, False for no
        """
        if self.assume_yes:
            logger.info(f"{message} [auto-confirmed]")
            return True

        suffix = "[Y/n]" if default else "[y/N]"
        question = colorize(f"➜ {message} {suffix} ", TermColors.WARNING, self.colored_output)

        while True:
            try:
                reply = self.input_func(question).strip().lower()
            except EOFError:
                return default

            if not reply:
                return default
            if reply.startswith("y"):
                return True
            if reply.startswith("n"):
                return False

    def choice(self, message: str, options: Sequence[T]) -> T:
        """
        Ask the operator to pick exactly one option.

        Options are shown numbered; either the option itself or its number is accepted.

        Args:
            message: Question to display
            options: Options to choose from

        Returns:
            The selected option

        Raises:
            UserAbortedError: If input ends before a valid selection
        """
        if not options:
            raise ValueError("choice() needs at least one option")

        print(colorize(f"➜ {message}", TermColors.WARNING, self.colored_output))
        for index, option in enumerate(options, 1):
            print(f"  {index}) {option}")

        while True:
            try:
                reply = self.input_func(f"{translate('prompts.common.choices')}: ").strip()
            except EOFError:
                raise UserAbortedError(translate("errors.filesystem.raid_aborted"))

            # An option's own value wins over its position in the list
            for option in options:
                if reply == str(option):
                    return option
            for index, option in enumerate(options, 1):
                if reply == str(index):
                    return option

            print(colorize(f"Invalid input: {reply}", TermColors.ERROR, self.colored_output))
