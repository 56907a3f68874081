import subprocess
from ..cli_logger import logger
from .. import errors


def run_shell_command(command, env=None, cwd=None, timeout=None, merge_output=False, stage="command"):
    """
    Executes a command and captures its output.

    Args:
        command (list): The command to execute as a list of strings.
        env (dict, optional): A dictionary of environment variables.
        cwd (str, optional): The working directory for the command.
        timeout (float, optional): Seconds before the command is killed.
        merge_output (bool): If True, stderr is interleaved into stdout.
        stage (str): Pipeline stage reported when the command is cancelled.

    Returns:
        A tuple (stdout, stderr, return_code). When merge_output is True,
        stderr is always empty.

    Raises:
        errors.Cancelled: if the command ran past ``timeout``.
    """
    try:
        result = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_output else subprocess.PIPE,
            text=True,
            env=env,
            check=False,
            cwd=cwd,
            timeout=timeout,
        )
        return result.stdout or "", result.stderr or "", result.returncode

    except subprocess.TimeoutExpired:
        logger.error("Command killed after deadline", command=command, timeout=timeout)
        raise errors.Cancelled(stage, command)
    except FileNotFoundError as e:
        logger.error(f"Command not found: {e.filename}")
        return "", str(e), -1
    except OSError as e:
        logger.error(f"Could not execute {command[0]}: {e}")
        return "", str(e), -1
