"""JSON provisioning definition loader."""

import json
from pathlib import Path

import pytest

from sppg_rbac.domain.exceptions import UnknownPermissionError, ValidationException
from sppg_rbac.infrastructure.provisioning import load_definition


def _write(tmp_path: Path, document: object) -> Path:
    path = tmp_path / "rbac.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_load_definition(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        {
            "permissions": [
                {"name": "menu.read", "description": "Melihat menu"},
                {"name": "menu.approve"},
            ],
            "roles": [
                {
                    "code": "manager",
                    "name": "Manager",
                    "permissions": ["menu.read", "menu.approve"],
                },
                {"code": "root", "name": "Root", "is_system_role": True},
            ],
        },
    )
    definition = load_definition(path)
    assert definition.permission_names() == {"menu.read", "menu.approve"}
    assert definition.permissions[0].module == "menu"
    assert [r.code for r in definition.system_roles()] == ["root"]
    assert definition.tenant_templates()[0].permissions == ("menu.read", "menu.approve")


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ValidationException):
        load_definition(tmp_path / "missing.json")


def test_malformed_document(tmp_path: Path) -> None:
    path = _write(tmp_path, {"permissions": [{"title": "menu.read"}]})
    with pytest.raises(ValidationException):
        load_definition(path)


def test_undeclared_permission(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        {"roles": [{"code": "chef", "name": "Chef", "permissions": ["menu.cook"]}]},
    )
    with pytest.raises(UnknownPermissionError):
        load_definition(path)
