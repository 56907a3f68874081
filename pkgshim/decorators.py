import functools
import click
import sys
from .cli_logger import logger
from .errors import PkgShimError


def _fail():
    logger.flush()
    sys.exit(1)


def handle_exceptions(func):
    """A decorator turning pipeline failures into a diagnostic and exit code 1.

    The buffered log is written to stderr only when the command fails.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.Abort:
            logger.warning("Command aborted by user.")
            _fail()
        except PkgShimError as e:
            logger.error("Stage failed", stage=e.stage, error=e)
            _fail()
        except click.ClickException:
            raise
        except Exception as e:
            logger.error(f"An unexpected error occurred: {e}")
            logger.exception(*sys.exc_info())
            _fail()
    return wrapper
