"""Unit tests for configuration models (modcreator.config).

Tests cover:
- ProjectConfig validation, immutability, tokens, path resolution
- ToolchainConfig defaults and install command building
- DependencyConfig defaults and ordering
- CreatorConfig defaults, save/load, from_env
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from modcreator.config import (
    DEFAULT_ACCOUNTS_DOMAIN,
    DEFAULT_API_URL,
    DEFAULT_TEMPLATES_DIR,
    REQUIRED_DIRECTORIES,
    CreatorConfig,
    DependencyConfig,
    ProjectConfig,
    ToolchainConfig,
)


# ---------------------------------------------------------------------------
# ProjectConfig
# ---------------------------------------------------------------------------


class TestProjectConfig:
    @pytest.mark.unit
    def test_defaults_for_urls(self):
        project = ProjectConfig(folder_name="demo", module_name="Demo", icon_name="star")
        assert project.accounts_domain == DEFAULT_ACCOUNTS_DOMAIN
        assert project.api_url == DEFAULT_API_URL

    @pytest.mark.unit
    def test_is_frozen(self, demo_project: ProjectConfig):
        with pytest.raises(ValidationError):
            demo_project.module_name = "Other"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "field,value",
        [
            ("folder_name", "Bad Name"),
            ("module_name", "lowercase"),
            ("icon_name", ""),
            ("accounts_domain", "not-a-url"),
            ("api_url", "ftp://x"),
        ],
    )
    def test_invalid_values_rejected(self, field: str, value: str):
        kwargs = {"folder_name": "demo", "module_name": "Demo", "icon_name": "star"}
        kwargs[field] = value
        with pytest.raises(ValidationError):
            ProjectConfig(**kwargs)

    @pytest.mark.unit
    def test_tokens(self, demo_project: ProjectConfig):
        assert demo_project.tokens == {"${moduleName}": "Demo", "${iconName}": "star"}

    @pytest.mark.unit
    def test_env_context(self, demo_project: ProjectConfig):
        assert demo_project.env_context == {
            "accounts_domain": "https://a.test/",
            "api_url": "https://a.test/api",
        }

    @pytest.mark.unit
    def test_resolve_path_subfolder(self, demo_project: ProjectConfig, tmp_path: Path):
        assert demo_project.resolve_path(tmp_path) == tmp_path.resolve() / "demo"

    @pytest.mark.unit
    def test_resolve_path_current_dir(self, tmp_path: Path):
        project = ProjectConfig(folder_name=".", module_name="Demo", icon_name="star")
        assert project.uses_current_dir is True
        assert project.resolve_path(tmp_path) == tmp_path.resolve()


# ---------------------------------------------------------------------------
# ToolchainConfig / DependencyConfig
# ---------------------------------------------------------------------------


class TestToolchainConfig:
    @pytest.mark.unit
    def test_defaults(self):
        tools = ToolchainConfig()
        assert tools.git_init == ["git", "init"]
        assert tools.create_app[:3] == ["npm", "create", "vite@latest"]
        assert tools.tailwind_init == ["npx", "tailwindcss", "init", "-p"]
        assert tools.ui_init == ["npx", "shadcn@latest", "init"]
        assert tools.command_timeout == 600

    @pytest.mark.unit
    def test_install_command(self):
        tools = ToolchainConfig()
        assert tools.install_command(["zod", "axios"]) == ["npm", "install", "zod", "axios"]

    @pytest.mark.unit
    def test_install_command_dev(self):
        tools = ToolchainConfig()
        assert tools.install_command(["postcss"], dev=True) == ["npm", "install", "-D", "postcss"]

    @pytest.mark.unit
    def test_timeout_lower_bound(self):
        with pytest.raises(ValidationError):
            ToolchainConfig(command_timeout=1)


class TestDependencyConfig:
    @pytest.mark.unit
    def test_group_order(self):
        deps = DependencyConfig()
        assert list(deps.groups) == ["ui", "core", "state", "routing", "utils"]

    @pytest.mark.unit
    def test_dev_defaults(self):
        deps = DependencyConfig()
        assert "tailwindcss@3" in deps.dev

    @pytest.mark.unit
    def test_defaults_not_shared(self):
        first = DependencyConfig()
        first.groups["ui"].append("extra")
        assert "extra" not in DependencyConfig().groups["ui"]

    @pytest.mark.unit
    def test_dev_group_name_reserved(self):
        with pytest.raises(ValidationError, match="reserved"):
            DependencyConfig(groups={"ui": ["zod"], "dev dependencies": ["vitest"]})

    @pytest.mark.unit
    def test_blank_group_name_rejected(self):
        with pytest.raises(ValidationError, match="cannot be empty"):
            DependencyConfig(groups={"  ": ["zod"]})


# ---------------------------------------------------------------------------
# CreatorConfig
# ---------------------------------------------------------------------------


class TestCreatorConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = CreatorConfig()
        assert config.templates_dir == DEFAULT_TEMPLATES_DIR
        assert config.required_directories == REQUIRED_DIRECTORIES
        assert len(config.required_directories) == 8

    @pytest.mark.unit
    def test_bundled_templates_exist(self):
        assert (DEFAULT_TEMPLATES_DIR / "src" / "App.tsx").is_file()

    @pytest.mark.unit
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        config = CreatorConfig(
            templates_dir=tmp_path / "tpl",
            dependencies=DependencyConfig(groups={"only": ["zod"]}, dev=[]),
        )
        path = config.save(tmp_path / "nested" / "settings.json")
        assert path.exists()

        loaded = CreatorConfig.load(path)
        assert loaded.templates_dir == tmp_path / "tpl"
        assert loaded.dependencies.groups == {"only": ["zod"]}
        assert loaded.dependencies.dev == []

    @pytest.mark.unit
    def test_from_env_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = CreatorConfig.from_env()
        assert config.templates_dir == DEFAULT_TEMPLATES_DIR
        assert config.default_api_url == DEFAULT_API_URL

    @pytest.mark.unit
    def test_from_env_overrides(self, tmp_path: Path):
        env = {
            "MODCREATOR_TEMPLATES_DIR": str(tmp_path),
            "MODCREATOR_COMMAND_TIMEOUT": "120",
            "MODCREATOR_ACCOUNTS_DOMAIN": "https://accounts.example/",
            "MODCREATOR_API_URL": "https://api.example/v1",
        }
        with patch.dict(os.environ, env, clear=True):
            config = CreatorConfig.from_env()
        assert config.templates_dir == tmp_path
        assert config.toolchain.command_timeout == 120
        assert config.default_accounts_domain == "https://accounts.example/"
        assert config.default_api_url == "https://api.example/v1"

    @pytest.mark.unit
    def test_from_env_non_integer_timeout(self):
        with patch.dict(os.environ, {"MODCREATOR_COMMAND_TIMEOUT": "ten"}, clear=True):
            with pytest.raises(ValueError, match="MODCREATOR_COMMAND_TIMEOUT"):
                CreatorConfig.from_env()

    @pytest.mark.unit
    def test_load_malformed_file(self, tmp_path: Path):
        path = tmp_path / "settings.json"
        path.write_text('{"toolchain": {"command_timeout": "soon"}}', encoding="utf-8")
        with pytest.raises(ValidationError):
            CreatorConfig.load(path)
