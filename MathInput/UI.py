# UI.py
"""""PySide6 user interface for the math input fields.

Structure
---------
- NumberField: QLineEdit that accepts numbers and math expressions
- InspectorWindow: small property inspector built from NumberFields
- SettingsDialog: modal dialog for user preferences

Responsibilities (NumberField)
------------------------------
- Forward key, focus and mouse events to a NumberInput controller
- Commit on Enter / focus loss, revert to the last valid value on failure
- Show the engine error as tooltip, italic text while typing an expression

Responsibilities (Settings)
---------------------------
- Load current settings and descriptions via config_manager
- Validate user input (e.g. minimum step)
- Save and apply theme changes immediately

The expression engine is synchronous and bounded (200 characters), so
commits run directly on the UI thread.
"""""

import logging
import sys
from pathlib import Path

import pyperclip
from PySide6 import QtWidgets, QtGui
from PySide6.QtCore import Qt, QEvent, Signal

from . import config_manager as config_manager
from . import error as E
from .NumberInput import NumberInput, SHIFT, CONTROL

logger = logging.getLogger(__name__)

# Resolve project root depending on run mode (Script or .exe)
if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent.parent

DARK_FIELD_STYLE = "background-color: #444444; color: white; border: 1px solid #666666;"
ERROR_FIELD_STYLE = "border: 1px solid #d9534f;"

KEY_NAMES = {
    Qt.Key.Key_Return: "Enter",
    Qt.Key.Key_Enter: "Enter",
    Qt.Key.Key_Escape: "Escape",
    Qt.Key.Key_Up: "Up",
    Qt.Key.Key_Down: "Down",
    Qt.Key.Key_Minus: "-",
}


def modifier_of(event):
    """Map Qt keyboard modifiers to the NumberInput step modifiers."""
    modifiers = event.modifiers()
    if modifiers & Qt.KeyboardModifier.ShiftModifier:
        return SHIFT
    if modifiers & (Qt.KeyboardModifier.ControlModifier | Qt.KeyboardModifier.MetaModifier):
        return CONTROL
    return None


class NumberField(QtWidgets.QLineEdit):
    """""

    Line edit bound to a NumberInput controller. Emits value_changed whenever
    a commit, an arrow key or a drag changes the value.

    """""

    value_changed = Signal(float)

    def __init__(self, value=0.0, parent=None, darkmode=False, **options):
        super().__init__(parent)
        self.darkmode = darkmode
        self.controller = NumberInput(value, on_change=self.value_changed.emit, **options)
        self.setAlignment(Qt.AlignmentFlag.AlignRight)
        self.setText(self.controller.display_value)
        self.textEdited.connect(self.handle_text_edited)
        self.refresh()

    # --- Public helpers ---
    def value(self):
        return self.controller.value

    def set_value(self, value):
        self.controller.set_value(value)
        self.refresh()

    def commit(self):
        """Apply the typed text; on failure revert and keep the error as tooltip."""
        if not self.controller.is_editing:
            self.controller.start_editing()
            self.controller.update_display_value(self.text())
        if self.controller.end_editing():
            self.refresh()
            return True
        logger.debug("Rejected input %r: %s", self.text(), self.controller.error)
        self.controller.revert()
        self.refresh()
        return False

    def refresh(self):
        """Sync text, font and styling with the controller state."""
        if self.text() != self.controller.display_value:
            self.setText(self.controller.display_value)

        font = self.font()
        font.setItalic(self.controller.is_expression)
        self.setFont(font)

        style = DARK_FIELD_STYLE if self.darkmode else ""
        if self.controller.error:
            style += ERROR_FIELD_STYLE
            self.setToolTip(self.controller.error)
        else:
            self.setToolTip("")
        self.setStyleSheet(style)
        self.setEnabled(not self.controller.disabled)

    # --- Event handlers ---
    def handle_text_edited(self, text):
        if not self.controller.is_editing:
            self.controller.start_editing()
        self.controller.update_display_value(text)
        self.refresh()

    def keyPressEvent(self, event):
        key = KEY_NAMES.get(event.key())
        if key == "Enter" and not self.controller.is_editing:
            # Enter on an untouched field commits whatever is shown
            self.controller.start_editing()
            self.controller.update_display_value(self.text())
        if key is not None and self.controller.handle_key(key, modifier_of(event)):
            self.refresh()
            event.accept()
            return
        super().keyPressEvent(event)

    def focusOutEvent(self, event):
        if self.controller.is_editing:
            self.commit()
        super().focusOutEvent(event)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.MiddleButton:
            self.controller.start_drag(event.position().x())
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if self.controller.is_dragging:
            self.controller.update_drag(event.position().x(), modifier_of(event))
            self.refresh()
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if self.controller.is_dragging:
            self.controller.end_drag()
            self.refresh()
            event.accept()
            return
        super().mouseReleaseEvent(event)


class SettingsDialog(QtWidgets.QDialog):
    """""

    This class is responsible for managing the settings window, saving the new settings and opening an error
    message if something went wrong.

    All of the Settings can be separated into two categories:
    1. Checkboxes   (Managed with True or False)
    2. Input Fields (Managed as an Integer)

    """""

    settings_saved = Signal()  # Signal to tell the main window to update

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}  # Setting key -> checkbox / input field

        # --- 1. Window Setup ---
        self.setWindowTitle("Field Settings")
        self.setMinimumSize(320, 220)

        main_layout = QtWidgets.QVBoxLayout(self)

        # --- 2. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.setting_description_list = config_manager.load_setting_description("all")

        # --- 3. Build Widgets ---
        for key_value, value in self.setting_value_list.items():
            description = self.setting_description_list.get(key_value, key_value)

            # --- 3a. Checkbox Builder (for Boolean settings) ---
            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox

            # --- 3b. Input Field Builder (for Integer settings) ---
            elif isinstance(value, int):
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                minimum = config_manager.MINIMUM_VALUES.get(key_value, 0)
                label = QtWidgets.QLabel(f"{description} (min. {minimum}):")
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))  # Show current value as placeholder

                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

        # --- 4. OK / Cancel Buttons ---
        button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.StandardButton.Ok | QtWidgets.QDialogButtonBox.StandardButton.Cancel
        )
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)

        button_box.accepted.connect(lambda: self.save_settings(self.setting_value_list))
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self, setting_value_list):
        for key_value, widget in self.widgets.items():

            # --- Checkboxes ---
            if isinstance(widget, QtWidgets.QCheckBox):
                setting_value_list[key_value] = widget.isChecked()

            # --- Input Fields ---
            elif isinstance(widget, QtWidgets.QLineEdit):
                new_value_str = widget.text().strip()

                # If user left it blank, keep the old value
                if new_value_str == "":
                    continue

                try:
                    setting_value_list[key_value] = config_manager.validate_setting(key_value, new_value_str)

                except ValueError as e:
                    # Show an error box and STOP the save process
                    logger.info("Invalid input for %s: %s", key_value, e)
                    area, message = E.describe("5002")
                    QtWidgets.QMessageBox.critical(
                        self, area,
                        f"Error 5002: {message}'{key_value}'\n\n{e}\n\nPlease correct your input.")
                    return

        saved_settings = config_manager.save_setting(setting_value_list)

        if saved_settings != {}:
            self.settings_saved.emit()
            self.accept()
        else:
            area, message = E.describe("5001")
            QtWidgets.QMessageBox.critical(
                self, area, f"Error 5001: {message}{config_manager.config_json}")

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                        QDialog {background-color: #121212;}
                        QLabel {color: white;}
                        QCheckBox {color: white;}
                        QLineEdit {background-color: #444444;color: white;border: 1px solid #666666;}
                        QDialogButtonBox QPushButton {background-color: #666666;color: white;}""")
        else:
            self.setStyleSheet("")


class InspectorWindow(QtWidgets.QWidget):
    """""

    A property inspector: one NumberField per property, a copy button for the
    focused field and a settings button.

    """""

    PROPERTIES = [
        # (label, initial value, options)
        ("Position X", 0.0, {}),
        ("Position Y", 0.0, {}),
        ("Position Z", 0.0, {}),
        ("Rotation", 0.0, {"min_value": -360, "max_value": 360}),
        ("Scale", 1.0, {"min_value": 0, "soft_max": 10}),
    ]

    def __init__(self):
        super().__init__()

        # --- 1. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.fields = {}
        self.last_field = None

        # --- 2. Window Setup ---
        icon_path = PROJECT_ROOT / "icons" / "icon.png"
        if icon_path.exists():
            self.setWindowIcon(QtGui.QIcon(str(icon_path)))
        self.setWindowTitle("Inspector")
        self.resize(320, 260)
        main_v_layout = QtWidgets.QVBoxLayout(self)

        # --- 3. Fields ---
        form = QtWidgets.QFormLayout()
        main_v_layout.addLayout(form)
        for label, value, options in self.PROPERTIES:
            field = NumberField(value, darkmode=self.setting_value_list["darkmode"],
                                **self.field_options(options))
            field.value_changed.connect(lambda new_value, name=label: self.handle_value_changed(name, new_value))
            field.installEventFilter(self)
            form.addRow(label, field)
            self.fields[label] = field

        # --- 4. Buttons ---
        button_row = QtWidgets.QHBoxLayout()
        main_v_layout.addLayout(button_row)
        self.copy_button = QtWidgets.QPushButton("Copy")
        self.copy_button.clicked.connect(self.copy_value)
        self.settings_button = QtWidgets.QPushButton("Settings")
        self.settings_button.clicked.connect(self.open_settings)
        button_row.addWidget(self.copy_button)
        button_row.addWidget(self.settings_button)

        self.status = QtWidgets.QLabel("")
        main_v_layout.addWidget(self.status)

        self.update_darkmode()

    def field_options(self, options):
        merged = {
            "precision": self.setting_value_list["decimal_places"],
            "step": self.setting_value_list["step"],
            "allow_expressions": self.setting_value_list["allow_expressions"],
        }
        merged.update(options)
        return merged

    def eventFilter(self, watched, event):
        # Remember the last focused field for the copy button
        if event.type() == QEvent.Type.FocusIn and isinstance(watched, NumberField):
            self.last_field = watched
        return super().eventFilter(watched, event)

    def handle_value_changed(self, name, value):
        self.status.setText(f"{name} = {value}")
        logger.debug("%s changed to %s", name, value)
        if self.setting_value_list["copy_on_commit"] == True:
            pyperclip.copy(str(value))

    def copy_value(self):
        field = self.last_field or next(iter(self.fields.values()))
        pyperclip.copy(field.text())
        self.status.setText(f"Copied {field.text()}")

    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.settings_saved.connect(self.apply_settings)
        settings_dialog.exec()  # modal

    def apply_settings(self):
        """Reload config.json and push the new settings into every field."""
        self.setting_value_list = config_manager.load_setting_value("all")
        for field in self.fields.values():
            controller = field.controller
            controller.precision = self.setting_value_list["decimal_places"]
            controller.step = self.setting_value_list["step"]
            controller.precision_step = controller.step / 10
            controller.large_step = controller.step * 10
            controller.allow_expressions = self.setting_value_list["allow_expressions"]
            field.darkmode = self.setting_value_list["darkmode"]
            field.set_value(controller.value)
        self.update_darkmode()

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("background-color: #121212; color: white;")
        else:
            self.setStyleSheet("")
        for field in self.fields.values():
            field.refresh()


def main():
    # --- Main Application Entry Point ---
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    window = InspectorWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
