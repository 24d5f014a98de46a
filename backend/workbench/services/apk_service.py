"""Edits to decompiled APK sources (AndroidManifest.xml, res/values/strings.xml)."""
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from workbench.schemas.actions import ModifyApkAction

ANDROID_NS = "http://schemas.android.com/apk/res/android"
ET.register_namespace("android", ANDROID_NS)

MANIFEST_NAME = "AndroidManifest.xml"
STRINGS_PATH = "res/values/strings.xml"

_XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'

_DESCRIPTIONS = {
    "change_icon": "change the app icon",
    "modify_strings": "modify the app strings",
    "add_feature": "add a feature to the app",
    "change_theme": "change the app theme",
}


class ApkModificationError(ValueError):
    pass


@dataclass
class ApkChanges:
    manifest: str | None = None
    strings: str | None = None


def describe_modification(action: ModifyApkAction) -> str:
    what = _DESCRIPTIONS[action.action]
    details = ", ".join(f"{k}={v}" for k, v in action.parameters.items())
    suffix = f" ({details})" if details else ""
    return (
        f"Are you sure you want to {what}{suffix} in your APK? "
        "This can affect how the application works."
    )


def _android(name: str) -> str:
    return f"{{{ANDROID_NS}}}{name}"


def _parse(xml: str, label: str) -> ET.Element:
    try:
        return ET.fromstring(xml.encode("utf-8"))
    except ET.ParseError as e:
        raise ApkModificationError(f"{label} is not valid XML: {e}") from e


def _serialize(root: ET.Element) -> str:
    ET.indent(root, space="    ")
    return _XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"


def set_application_attribute(manifest_xml: str, attribute: str, value: str) -> str:
    root = _parse(manifest_xml, MANIFEST_NAME)
    application = root.find("application")
    if application is None:
        raise ApkModificationError(f"{MANIFEST_NAME} has no <application> element")
    application.set(_android(attribute), value)
    return _serialize(root)


def add_manifest_entries(manifest_xml: str, feature: str | None = None, permissions: list[str] | None = None) -> str:
    root = _parse(manifest_xml, MANIFEST_NAME)
    # uses-* elements go before <application>
    application = root.find("application")
    index = list(root).index(application) if application is not None else len(root)

    wanted = [("uses-permission", p) for p in permissions or []]
    if feature:
        wanted.append(("uses-feature", feature))

    for tag, name in wanted:
        if any(el.get(_android("name")) == name for el in root.findall(tag)):
            continue
        el = ET.Element(tag, {_android("name"): name})
        root.insert(index, el)
        index += 1
    return _serialize(root)


def upsert_strings(strings_xml: str | None, entries: dict[str, str]) -> str:
    root = _parse(strings_xml, STRINGS_PATH) if strings_xml else ET.Element("resources")
    for name, value in entries.items():
        el = next((s for s in root.findall("string") if s.get("name") == name), None)
        if el is None:
            el = ET.SubElement(root, "string", {"name": name})
        el.text = str(value)
    return _serialize(root)


def _require(parameters: dict, key: str, action: str) -> str:
    value = parameters.get(key)
    if not isinstance(value, str) or not value:
        raise ApkModificationError(f"{action} requires a '{key}' parameter")
    return value


def apply_modification(action: ModifyApkAction, manifest_xml: str, strings_xml: str | None = None) -> ApkChanges:
    params = action.parameters

    if action.action == "change_icon":
        icon = _require(params, "icon", action.action)
        return ApkChanges(manifest=set_application_attribute(manifest_xml, "icon", icon))

    if action.action == "change_theme":
        theme = _require(params, "theme", action.action)
        return ApkChanges(manifest=set_application_attribute(manifest_xml, "theme", theme))

    if action.action == "modify_strings":
        entries = params.get("strings", params)
        if not isinstance(entries, dict) or not entries:
            raise ApkModificationError("modify_strings requires string name/value pairs")
        return ApkChanges(strings=upsert_strings(strings_xml, entries))

    # add_feature
    permissions = params.get("permissions") or []
    if isinstance(permissions, str):
        permissions = [permissions]
    feature = params.get("feature")
    if not feature and not permissions:
        raise ApkModificationError("add_feature requires a 'feature' or 'permissions' parameter")
    return ApkChanges(
        manifest=add_manifest_entries(
            manifest_xml, str(feature) if feature else None, [str(p) for p in permissions]
        )
    )
