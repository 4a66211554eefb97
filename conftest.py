# Root-level pytest configuration applied to all tests
# - Ensure 'tools/' is importable so tests can `import pseudocode_converter`
#   without an editable install

from pathlib import Path
import sys


def _add_tools_to_sys_path() -> None:
    repo_root = Path(__file__).resolve().parent
    tools_dir = repo_root / "tools"
    if str(tools_dir) not in sys.path:
        sys.path.insert(0, str(tools_dir))


_add_tools_to_sys_path()
