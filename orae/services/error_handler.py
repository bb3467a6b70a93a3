"""Error handling service for fatal errors."""

import sys
import traceback
from typing import Optional

from orae.services.logging_service import LoggingService


class ErrorHandler:
    """Handles fatal errors by reporting them and terminating the process."""

    @staticmethod
    def handle_fatal_error(error: BaseException, context: Optional[str] = None) -> None:
        """Report a fatal error on stderr and in the log, then exit with status 1.

        Args:
            error: The exception that occurred.
            context: Optional context message describing where the error occurred.
        """
        LoggingService.get_instance().error(f"Fatal error ({context or 'no context'})", exc_info=error)

        print("=" * 80, file=sys.stderr)
        print("FATAL ERROR", file=sys.stderr)
        print("=" * 80, file=sys.stderr)

        if context:
            print(f"Context: {context}", file=sys.stderr)
            print("", file=sys.stderr)

        print(f"Error Type: {type(error).__name__}", file=sys.stderr)
        print(f"Error Message: {error}", file=sys.stderr)

        reasons = getattr(error, "reasons", None)
        if reasons:
            print("Reasons:", file=sys.stderr)
            for reason in reasons:
                print(f"  - {reason}", file=sys.stderr)
        print("", file=sys.stderr)

        print("Traceback:", file=sys.stderr)
        traceback.print_exception(type(error), error, error.__traceback__, file=sys.stderr)

        print("=" * 80, file=sys.stderr)
        print("ORAE will now terminate.", file=sys.stderr)
        print("=" * 80, file=sys.stderr)

        LoggingService.get_instance().shutdown()
        sys.exit(1)

    @staticmethod
    def setup_exception_handler() -> None:
        """Install a global exception handler for uncaught exceptions."""
        def exception_handler(exc_type, exc_value, exc_traceback):
            """Handle uncaught exceptions."""
            if issubclass(exc_type, KeyboardInterrupt):
                print("\nInterrupted by user.", file=sys.stderr)
                sys.exit(130)

            error = exc_value if exc_value else exc_type()
            ErrorHandler.handle_fatal_error(error, "Uncaught exception")

        sys.excepthook = exception_handler
