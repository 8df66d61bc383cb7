"""End-to-end runs of the alias-loader pass over Composer projects on disk."""
from __future__ import annotations

import pytest

import class_alias_loader
from class_alias_loader.errors import ConfigurationError, EntryPointRewriteError
from class_alias_loader.generator import ClassAliasMapGenerator
from class_alias_loader.phpdata import parse_return_value
from class_alias_loader.reporter import BufferedReporter

CONFIG_KEY = "typo3/class-alias-loader"
MAP_FILE = "Migrations/Code/ClassAliasMap.php"
WRAPPED_RETURN = (
    "return ClassAliasLoaderInitXYZ::initializeClassAliasLoader(ComposerAutoloaderInitXYZ::getLoader());"
)


def _run(project, optimize: bool = False) -> tuple[bool, BufferedReporter]:
    reporter = BufferedReporter()
    rewritten = ClassAliasMapGenerator(project.root, reporter=reporter, optimize=optimize).generate()
    return rewritten, reporter


def _alias_map(project) -> dict:
    return parse_return_value(project.alias_map.read_text())


def _add_legacy_package(project, alias_map_source, aliases: dict[str, str] | None = None) -> None:
    project.add_package(
        "acme/legacy",
        extra={CONFIG_KEY: {"class-alias-maps": [MAP_FILE]}},
        files={MAP_FILE: alias_map_source(aliases or {"Tx_Acme_Old": "Acme\\Domain\\Model\\Page"})},
    )


# ---------------------------------------------------------------------------
# Nothing to do
# ---------------------------------------------------------------------------


class TestNoOp:
    def test_project_without_alias_maps_is_left_untouched(self, composer_project) -> None:
        before = composer_project.snapshot()
        rewritten, reporter = _run(composer_project)
        assert rewritten is False
        assert composer_project.snapshot() == before
        assert not composer_project.alias_map.exists()
        assert not composer_project.initializer.exists()
        assert reporter.messages == []

    def test_packages_without_configuration(self, composer_project) -> None:
        composer_project.add_package("acme/plain")
        before = composer_project.snapshot()
        assert _run(composer_project)[0] is False
        assert composer_project.snapshot() == before

    def test_missing_map_file_is_reported_but_not_fatal(self, composer_project) -> None:
        composer_project.add_package("acme/broken", extra={CONFIG_KEY: {"class-alias-maps": ["nope.php"]}})
        before = composer_project.snapshot()
        rewritten, reporter = _run(composer_project)
        assert rewritten is False
        assert reporter.warnings == [
            'The class alias map file "nope.php" configured in package "acme/broken" was not found!'
        ]
        assert composer_project.snapshot() == before

    def test_empty_map_does_not_count_as_found(self, composer_project) -> None:
        composer_project.add_package(
            "acme/empty",
            extra={CONFIG_KEY: {"class-alias-maps": ["map.php"]}},
            files={"map.php": "<?php return [];"},
        )
        assert _run(composer_project)[0] is False


# ---------------------------------------------------------------------------
# Alias maps
# ---------------------------------------------------------------------------


class TestAliasMaps:
    def test_aliases_are_merged_and_loader_spliced(self, composer_project, alias_map_source) -> None:
        _add_legacy_package(composer_project, alias_map_source)
        rewritten, reporter = _run(composer_project)

        assert rewritten is True
        assert reporter.infos == [
            "Generating class alias map file",
            "Inserting class alias loader into main autoload.php file",
        ]
        assert _alias_map(composer_project) == {
            "aliasToClassNameMapping": {"tx_acme_old": "Acme\\Domain\\Model\\Page"},
            "classNameToAliasMapping": {"Acme\\Domain\\Model\\Page": {"tx_acme_old": "tx_acme_old"}},
        }
        entry_point = composer_project.entry_point.read_text()
        assert "return ComposerAutoloaderInitXYZ::getLoader();" not in entry_point
        assert "require_once __DIR__ . '/composer/autoload_alias_loader_real.php';" in entry_point
        assert entry_point.rstrip().endswith(WRAPPED_RETURN)
        initializer = composer_project.initializer.read_text()
        assert "class ClassAliasLoaderInitXYZ {" in initializer
        assert "setCaseSensitiveClassLoading(true);" in initializer
        assert "register(true);" in initializer

    def test_case_sensitive_run_keeps_class_map(self, composer_project, alias_map_source) -> None:
        _add_legacy_package(composer_project, alias_map_source)
        before = composer_project.class_map.read_bytes()
        _run(composer_project)
        assert composer_project.class_map.read_bytes() == before

    def test_second_run_is_idempotent(self, composer_project, alias_map_source) -> None:
        _add_legacy_package(composer_project, alias_map_source)
        _run(composer_project)
        entry_point = composer_project.entry_point.read_text()
        alias_map = composer_project.alias_map.read_text()

        _run(composer_project)
        assert composer_project.entry_point.read_text() == entry_point
        assert composer_project.alias_map.read_text() == alias_map
        assert entry_point.count("initializeClassAliasLoader") == 1

    def test_root_package_maps_are_read_from_base_path(self, composer_project, alias_map_source) -> None:
        composer_project.set_root(extra={CONFIG_KEY: {"class-alias-maps": ["build/aliases.php"]}})
        composer_project.add_root_file("build/aliases.php", alias_map_source({"Old_Root": "Acme\\Root"}))
        assert _run(composer_project)[0] is True
        assert _alias_map(composer_project)["aliasToClassNameMapping"] == {"old_root": "Acme\\Root"}

    def test_json_and_yaml_maps(self, composer_project) -> None:
        composer_project.add_package(
            "acme/data",
            extra={CONFIG_KEY: {"class-alias-maps": ["aliases.json", "aliases.yaml"]}},
            files={
                "aliases.json": '{"Json_Old": "Acme\\\\FromJson"}',
                "aliases.yaml": "Yaml_Old: 'Acme\\FromYaml'\n",
            },
        )
        assert _run(composer_project)[0] is True
        assert _alias_map(composer_project)["aliasToClassNameMapping"] == {
            "json_old": "Acme\\FromJson",
            "yaml_old": "Acme\\FromYaml",
        }

    def test_later_package_wins_a_collision(self, composer_project, alias_map_source) -> None:
        composer_project.set_root(extra={CONFIG_KEY: {"class-alias-maps": ["aliases.php"]}})
        composer_project.add_root_file("aliases.php", alias_map_source({"Shared_Name": "Acme\\Root"}))
        _add_legacy_package(composer_project, alias_map_source, {"shared_name": "Acme\\Package"})
        _run(composer_project)

        data = _alias_map(composer_project)
        assert data["aliasToClassNameMapping"] == {"shared_name": "Acme\\Package"}
        assert data["classNameToAliasMapping"]["Acme\\Package"] == {"shared_name": "shared_name"}
        assert data["classNameToAliasMapping"]["Acme\\Root"] == {"shared_name": "shared_name"}

    def test_legacy_section_is_reported(self, composer_project, alias_map_source) -> None:
        composer_project.add_package(
            "acme/old-style",
            extra={"helhum/class-alias-loader": {"class-alias-maps": [MAP_FILE]}},
            files={MAP_FILE: alias_map_source({"Old": "Acme\\New"})},
        )
        rewritten, reporter = _run(composer_project)
        assert rewritten is True
        assert reporter.infos[0] == (
            'The package "acme/old-style" uses "helhum/class-alias-loader" section to define class alias maps, '
            'which is deprecated. Please use "typo3/class-alias-loader" instead!'
        )
        assert _alias_map(composer_project)["aliasToClassNameMapping"] == {"old": "Acme\\New"}

    def test_malformed_configuration_aborts_before_writing(self, composer_project) -> None:
        composer_project.add_package("acme/bad", extra={CONFIG_KEY: {"class-alias-maps": "map.php"}})
        before = composer_project.snapshot()
        with pytest.raises(ConfigurationError, match="must be an array"):
            _run(composer_project)
        assert composer_project.snapshot() == before
        assert not composer_project.alias_map.exists()


# ---------------------------------------------------------------------------
# Root package settings
# ---------------------------------------------------------------------------


class TestRootSettings:
    def test_always_add_writes_empty_map(self, composer_project) -> None:
        composer_project.set_root(extra={CONFIG_KEY: {"always-add-alias-loader": True}})
        rewritten, reporter = _run(composer_project)
        assert rewritten is True
        assert reporter.infos[0] == "Generating empty class alias map file"
        assert _alias_map(composer_project) == {
            "aliasToClassNameMapping": {},
            "classNameToAliasMapping": {},
        }
        assert composer_project.entry_point.read_text().rstrip().endswith(WRAPPED_RETURN)

    def test_always_add_is_ignored_for_dependencies(self, composer_project) -> None:
        composer_project.add_package("acme/lib", extra={CONFIG_KEY: {"always-add-alias-loader": True}})
        assert _run(composer_project)[0] is False

    def test_case_insensitive_loading_folds_class_map(self, composer_project) -> None:
        composer_project.set_root(extra={CONFIG_KEY: {"autoload-case-sensitivity": False}})
        rewritten, reporter = _run(composer_project)

        assert rewritten is True
        assert reporter.infos == [
            "Generating empty class alias map file",
            "Re-writing class map to support case insensitive class loading",
            "Inserting class alias loader into main autoload.php file",
        ]
        assert reporter.warnings == [
            "Case insensitive class loading only works reliably if you use the optimize class loading "
            "feature of composer"
        ]
        class_map = composer_project.class_map.read_text()
        assert "'my\\\\class' => $baseDir . '/src/My/Class.php'," in class_map
        assert "setCaseSensitiveClassLoading(false);" in composer_project.initializer.read_text()

    def test_optimized_run_does_not_warn(self, composer_project) -> None:
        composer_project.set_root(extra={CONFIG_KEY: {"autoload-case-sensitivity": False}})
        assert _run(composer_project, optimize=True)[1].warnings == []

    def test_optimize_setting_from_manifest(self, composer_project) -> None:
        composer_project.set_root(
            extra={CONFIG_KEY: {"autoload-case-sensitivity": False}},
            config={"classmap-authoritative": True},
        )
        assert _run(composer_project)[1].warnings == []

    def test_legacy_flat_case_sensitivity_key(self, composer_project) -> None:
        composer_project.set_root(extra={"autoload-case-sensitivity": False})
        rewritten, reporter = _run(composer_project)
        assert rewritten is True
        assert reporter.infos[0] == (
            'The package "acme/site" uses "autoload-case-sensitivity" section on top level, which is deprecated. '
            'Please move this config below the top level key "typo3/class-alias-loader" instead!'
        )

    def test_null_case_sensitivity_leaves_project_untouched(self, composer_project) -> None:
        composer_project.set_root(extra={CONFIG_KEY: {"autoload-case-sensitivity": None}})
        before = composer_project.snapshot()
        assert _run(composer_project)[0] is False
        assert composer_project.snapshot() == before

    def test_case_sensitivity_of_dependencies_is_ignored(self, composer_project) -> None:
        composer_project.add_package("acme/lib", extra={CONFIG_KEY: {"autoload-case-sensitivity": False}})
        assert _run(composer_project)[0] is False

    def test_prepend_and_suffix_settings(self, composer_project, alias_map_source) -> None:
        composer_project.set_root(config={"prepend-autoloader": False, "autoloader-suffix": "Fixed"})
        _add_legacy_package(composer_project, alias_map_source)
        _run(composer_project)
        initializer = composer_project.initializer.read_text()
        assert "class ClassAliasLoaderInitFixed {" in initializer
        assert "register(false);" in initializer
        assert composer_project.entry_point.read_text().rstrip().endswith(
            "return ClassAliasLoaderInitFixed::initializeClassAliasLoader(ComposerAutoloaderInitXYZ::getLoader());"
        )


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_unexpected_entry_point_leaves_files_untouched(self, composer_project, alias_map_source) -> None:
        _add_legacy_package(composer_project, alias_map_source)
        composer_project.entry_point.write_text("<?php\nreturn require __DIR__ . '/other.php';\n")
        before = composer_project.snapshot()

        with pytest.raises(EntryPointRewriteError):
            _run(composer_project)
        assert composer_project.snapshot() == before
        assert not composer_project.alias_map.exists()
        assert not composer_project.initializer.exists()

    def test_missing_class_map_for_case_insensitive_loading(self, composer_project) -> None:
        composer_project.set_root(extra={CONFIG_KEY: {"autoload-case-sensitivity": False}})
        composer_project.class_map.unlink()
        entry_point = composer_project.entry_point.read_bytes()

        with pytest.raises(EntryPointRewriteError, match="class map"):
            _run(composer_project)
        assert composer_project.entry_point.read_bytes() == entry_point
        assert not composer_project.alias_map.exists()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def test_public_api(composer_project, alias_map_source) -> None:
    _add_legacy_package(composer_project, alias_map_source)
    alias_map = class_alias_loader.collect(str(composer_project.root))
    assert alias_map.alias_to_class == {"tx_acme_old": "Acme\\Domain\\Model\\Page"}
    assert not composer_project.alias_map.exists()

    assert class_alias_loader.generate(str(composer_project.root)) is True
    assert composer_project.alias_map.exists()
