# =============================================================================
# lib/settings_form.py - Nested Site-Setting Form Description
# =============================================================================
# Site settings hold arbitrary nested JSON. This module walks a value and
# describes the editable form for it, and splices an edited leaf back into a
# deep copy of the document without disturbing sibling data.
#
# - JsonKind: tagged variant of a JSON value (object/array/string/...)
# - FieldControl: which control edits a node (text, textarea, image, ...)
# - build_form(): recursive visitor producing a FormNode tree
# - set_at_path(): deep-clone + splice one leaf
#
# Usage:
#   form = describe_setting({"id": "s1", "key": "footer", "value": {...}})
#   updated = set_at_path(value, ["social_links", "facebook"], "https://...")
# =============================================================================

from __future__ import annotations

import copy
import json
from enum import Enum
from typing import Any, Sequence

from pydantic import BaseModel, Field


class JsonKind(str, Enum):
    """Which JSON variant a value is."""
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


class FieldControl(str, Enum):
    """Form control used to edit a node."""
    TEXT = "text"
    TEXTAREA = "textarea"
    IMAGE = "image"
    GROUP = "group"      # nested object
    LIST = "list"        # array
    RAW = "raw"          # read-only fallback


# Key substrings that make a leaf an image-upload control
IMAGE_KEY_MARKERS: tuple[str, ...] = ("image", "logo", "icon")

# Key substrings that make a whole top-level setting an image control
SETTING_IMAGE_KEY_MARKERS: tuple[str, ...] = ("image", "logo")

# Strings longer than this get a multi-line control
TEXTAREA_MIN_LENGTH = 100

SETTING_LABELS: dict[str, str] = {
    "header": "Header Configuration",
    "footer": "Footer Configuration",
    "company_branding": "Company Branding",
    "social_media": "Social Media Links",
    "logo_width": "Logo Width (px)",
    "hero_section_height_percentage": "Hero Section Height",
    "products_page": "Products Page Content",
    "theme_colors": "Theme Colors",
    "hero_content": "Hero Section Content",
    "price_toggle": "Price Display Toggle",
}


class FormNode(BaseModel):
    """
    One node of a described settings form.

    Leaves carry the current value; groups and lists carry children.
    """

    path: list[str] = Field(default_factory=list)
    key: str | None = None
    label: str
    kind: JsonKind
    control: FieldControl
    value: Any = None
    upload_section: str | None = None
    children: list["FormNode"] = Field(default_factory=list)

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)


# =============================================================================
# Labels
# =============================================================================

def display_label(key: str) -> str:
    """footer_links -> 'Footer Links'."""
    words = key.replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def setting_label(key: str) -> str:
    """Friendly title for a top-level setting key."""
    return SETTING_LABELS.get(key) or display_label(key)


# =============================================================================
# Classification
# =============================================================================

def json_kind(value: Any) -> JsonKind | None:
    """
    Tag a Python value with its JSON variant.

    Returns None for values that aren't JSON (sets, objects, ...).
    """
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    return None


def leaf_control(key: str | None, value: Any) -> FieldControl:
    """
    Pick the control for a primitive leaf.

    The key check wins over the length check, so a long image URL is still
    an image control.
    """
    lowered = (key or "").lower()
    if any(marker in lowered for marker in IMAGE_KEY_MARKERS):
        return FieldControl.IMAGE
    if isinstance(value, str) and len(value) > TEXTAREA_MIN_LENGTH:
        return FieldControl.TEXTAREA
    return FieldControl.TEXT


# =============================================================================
# Visitor
# =============================================================================

def _raw_node(path: list[str], key: str | None, label: str, value: Any) -> FormNode:
    try:
        shown = value if isinstance(value, str) else json.dumps(value)
    except (TypeError, ValueError):
        shown = repr(value)
    return FormNode(
        path=path,
        key=key,
        label=label,
        kind=json_kind(value) or JsonKind.STRING,
        control=FieldControl.RAW,
        value=shown,
    )


def build_form(
    value: Any,
    path: Sequence[str] = (),
    key: str | None = None,
    label: str | None = None,
    setting_id: str | None = None,
) -> FormNode:
    """
    Recursively describe the form for a JSON value.

    Objects become groups with one child per key (insertion order kept),
    arrays become lists whose object items are walked as "Item N" groups and
    whose primitive items are shown read-only. Anything that isn't JSON
    degrades to a raw text node.
    """
    path = [str(segment) for segment in path]
    label = label or (display_label(key) if key else "Value")
    kind = json_kind(value)

    if kind is None:
        return _raw_node(path, key, label, value)

    if kind == JsonKind.OBJECT:
        children = [
            build_form(child, [*path, str(child_key)], key=str(child_key), setting_id=setting_id)
            for child_key, child in value.items()
        ]
        return FormNode(path=path, key=key, label=label, kind=kind, control=FieldControl.GROUP, children=children)

    if kind == JsonKind.ARRAY:
        children = []
        for index, item in enumerate(value):
            item_path = [*path, str(index)]
            item_label = f"Item {index + 1}"
            if isinstance(item, dict):
                children.append(build_form(item, item_path, label=item_label, setting_id=setting_id))
            else:
                children.append(_raw_node(item_path, None, item_label, item))
        return FormNode(path=path, key=key, label=label, kind=kind, control=FieldControl.LIST, children=children)

    control = leaf_control(key, value)
    section = None
    if control == FieldControl.IMAGE and setting_id:
        section = f"{setting_id}_{'.'.join(path)}"
    return FormNode(
        path=path,
        key=key,
        label=label,
        kind=kind,
        control=control,
        value=value,
        upload_section=section,
    )


def describe_setting(setting: dict[str, Any]) -> FormNode:
    """
    Describe the edit form for a whole site_settings row.

    A setting whose key names an image or logo is edited as one image
    control regardless of the value's shape.
    """
    key = setting.get("key") or ""
    setting_id = str(setting.get("id") or key)
    value = setting.get("value")
    label = setting_label(key)

    if any(marker in key.lower() for marker in SETTING_IMAGE_KEY_MARKERS):
        return FormNode(
            key=key,
            label=label,
            kind=json_kind(value) or JsonKind.STRING,
            control=FieldControl.IMAGE,
            value=value,
            upload_section=key,
        )

    if isinstance(value, (dict, list)):
        return build_form(value, key=key, label=label, setting_id=setting_id)

    kind = json_kind(value)
    if kind is None:
        return _raw_node([], key, label, value)
    control = FieldControl.TEXTAREA if isinstance(value, str) and len(value) > TEXTAREA_MIN_LENGTH else FieldControl.TEXT
    return FormNode(key=key, label=label, kind=kind, control=control, value=value)


# =============================================================================
# Paths
# =============================================================================

def parse_path(path: str | Sequence[Any]) -> list[str]:
    """Accept "a.b.0.c" or ["a", "b", 0, "c"]."""
    if isinstance(path, str):
        return [segment for segment in path.split(".") if segment != ""]
    return [str(segment) for segment in path]


def _index(segment: str, length: int) -> int:
    if not segment.lstrip("-").isdigit():
        raise KeyError(f"'{segment}' is not an array index")
    index = int(segment)
    if index < 0 or index >= length:
        raise IndexError(f"index {index} out of range for array of {length}")
    return index


def get_at_path(document: Any, path: str | Sequence[Any]) -> Any:
    """
    Read the value at path.

    Raises:
        KeyError / IndexError: If the path doesn't exist
    """
    current = document
    for segment in parse_path(path):
        if isinstance(current, list):
            current = current[_index(segment, len(current))]
        elif isinstance(current, dict):
            current = current[segment]
        else:
            raise KeyError(f"'{segment}' is below a {json_kind(current).value if json_kind(current) else 'non-JSON'} value")
    return current


def set_at_path(document: Any, path: str | Sequence[Any], value: Any) -> Any:
    """
    Return a deep copy of document with the leaf at path replaced.

    Missing intermediate objects are created; existing arrays are indexed,
    never extended. Sibling keys keep their order and array items their
    positions. An empty path replaces the whole document.

    Raises:
        KeyError / IndexError: If the path crosses a primitive or indexes
            past the end of an array
    """
    segments = parse_path(path)
    if not segments:
        return copy.deepcopy(value)

    if document is None:
        updated = {}
    elif isinstance(document, (dict, list)):
        updated = copy.deepcopy(document)
    else:
        raise KeyError(f"value {document!r} is not an object or array")
    current = updated

    for segment in segments[:-1]:
        if isinstance(current, list):
            current = current[_index(segment, len(current))]
            continue
        child = current.get(segment)
        if not isinstance(child, (dict, list)):
            if child not in (None, ""):
                raise KeyError(f"'{segment}' holds a primitive value")
            child = {}
            current[segment] = child
        current = child

    last = segments[-1]
    if isinstance(current, list):
        current[_index(last, len(current))] = copy.deepcopy(value)
    else:
        current[last] = copy.deepcopy(value)
    return updated
