"""
termx.components — interactive widgets and progress indicators.
"""
from .base import Component, Widget
from .combo_box import ComboBox
from .confirm import Confirm
from .input import Input, Password
from .menu import Menu, MenuItem, separator
from .multi_select import MultiSelect
from .progress import ProgressBar
from .select_list import Select
from .spinner import Spinner
from .table import Table

__all__ = [
    "ComboBox",
    "Component",
    "Confirm",
    "Input",
    "Menu",
    "MenuItem",
    "MultiSelect",
    "Password",
    "ProgressBar",
    "Select",
    "Spinner",
    "Table",
    "Widget",
    "separator",
]
