# Main.py
""""" Entry point for the math input inspector.

   Responsibilities:
   - Detect run mode (script vs PyInstaller.exe)
   - Verify required files exist in development mode
   - Load configuration, set up logging and start the Qt GUI

"""""
import logging
import sys
from pathlib import Path

from MathInput import config_manager as config_manager


# Resolve project root depending on run mode (Script or .exe)

if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent

logger = logging.getLogger("MathInput")


def check_files_exist(project_root=PROJECT_ROOT):

    """
      Fail fast in development if required files are missing / moved / renamed.
      Returns the list of missing file names (empty if everything is in place).
    """

    modules_dir = project_root / "MathInput"

    REQUIRED = [
        modules_dir / "UI.py",
        modules_dir / "MathEngine.py",
        modules_dir / "ScientificEngine.py",
        modules_dir / "NumberInput.py",
        modules_dir / "config_manager.py",
        project_root / "config.json",
        project_root / "ui_strings.json",
    ]

    return [file_path.name for file_path in REQUIRED if not file_path.exists()]


def configure_logging(settings):
    level = logging.DEBUG if settings.get("debug") == True else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():

    """
    Load configuration and start the GUI.
    - Keep this thin: no business logic here.
    """

    all_settings = config_manager.load_setting_value("all")
    configure_logging(all_settings)
    logger.info("Settings loaded: %s", all_settings)

    # Imported late so the engine and tests never need a Qt installation
    from MathInput import UI as UI

    # Delegate control to the UI layer; the UI owns the event loop.
    UI.main()


if __name__ == "__main__":
    is_running_as_exe = getattr(sys, 'frozen', False)

    if not is_running_as_exe:
        missing_files = check_files_exist()
        if missing_files:
            print("Error: The following files are missing or in the wrong location:")
            for file_name in missing_files:
                print(f"- {file_name}")
            sys.exit(1)
    main()
