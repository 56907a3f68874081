from .command_executor import run_shell_command
from .file_manager import copy_tree, link_file
