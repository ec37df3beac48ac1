"""Tests for spec_sources.matcher."""

import pytest

from spec_sources.matcher import matched_specs, spec_file_extension_of, transform_spec
from spec_sources.models import SpecRecord


class TestMatchedSpecs:
    """Tests for matched_specs."""

    def test_single_literal_spec_returns_spec_name_only(self):
        """A single --spec path reduces relative_to_common_root to the file name."""
        result = matched_specs(
            project_root="/var/folders/T/cy-projects/e2e",
            testing_type="e2e",
            spec_absolute_paths=[
                "/var/folders/T/cy-projects/e2e/cypress/integration/screenshot_element_capture_spec.js",
            ],
            spec_pattern="/var/folders/T/cy-projects/e2e/cypress/integration/screenshot_element_capture_spec.js",
            sep="/",
        )

        assert result == [
            SpecRecord(
                absolute="/var/folders/T/cy-projects/e2e/cypress/integration/screenshot_element_capture_spec.js",
                relative="cypress/integration/screenshot_element_capture_spec.js",
                relative_to_common_root="screenshot_element_capture_spec.js",
                base_name="screenshot_element_capture_spec.js",
                file_name="screenshot_element_capture_spec",
                file_extension=".js",
                spec_file_extension=".js",
                name="cypress/integration/screenshot_element_capture_spec.js",
                spec_type="integration",
            )
        ]

    def test_multiple_spec_patterns_remove_all_common_path(self):
        result = matched_specs(
            project_root="/var/folders/T/cy-projects/e2e",
            testing_type="e2e",
            spec_absolute_paths=[
                "/var/folders/T/cy-projects/e2e/cypress/integration/simple_passing_spec.js",
                "/var/folders/T/cy-projects/e2e/cypress/integration/simple_hooks_spec.js",
                "/var/folders/T/cy-projects/e2e/cypress/integration/simple_failing_spec.js",
                "/var/folders/T/cy-projects/e2e/cypress/integration/simple_failing_hook_spec.js",
            ],
            spec_pattern=[
                "/var/folders/T/cy-projects/e2e/cypress/integration/simple_passing_spec.js",
                "/var/folders/T/cy-projects/e2e/cypress/integration/simple_hooks_spec.js",
                "/var/folders/T/cy-projects/e2e/cypress/integration/simple_failing_spec.js",
                "/var/folders/T/cy-projects/e2e/cypress/integration/simple_failing_h*_spec.js",
            ],
            sep="/",
        )

        assert [spec.relative_to_common_root for spec in result] == [
            "simple_passing_spec.js",
            "simple_hooks_spec.js",
            "simple_failing_spec.js",
            "simple_failing_hook_spec.js",
        ]

    def test_generic_glob_infers_common_path(self):
        result = matched_specs(
            project_root="/Users/dev/app",
            testing_type="e2e",
            spec_absolute_paths=[
                "/Users/dev/app/cypress/e2e/integration/files.spec.ts",
                "/Users/dev/app/cypress/e2e/integration/index.spec.ts",
            ],
            spec_pattern="cypress/e2e/integration/**/*.spec.ts",
            sep="/",
        )

        assert result[0].relative_to_common_root == "files.spec.ts"
        assert result[1].relative_to_common_root == "index.spec.ts"
        assert result[0].spec_file_extension == ".spec.ts"
        assert result[0].file_name == "files"

    def test_deeply_nested_spec_removes_superfluous_directories(self):
        result = matched_specs(
            project_root="/var/folders/y5/T/cy-projects/e2e",
            testing_type="e2e",
            spec_absolute_paths=[
                "/var/folders/y5/T/cy-projects/e2e/cypress/integration/nested-1/nested-2/screenshot_nested_file_spec.js",
            ],
            spec_pattern="/var/folders/y5/T/cy-projects/e2e/cypress/integration/nested-1/nested-2/screenshot_nested_file_spec.js",
            sep="/",
        )

        assert result[0].relative_to_common_root == "screenshot_nested_file_spec.js"

    def test_mixed_depths_strip_only_shared_directories(self):
        """A literal path mixed with broader globs keeps the differing segments."""
        result = matched_specs(
            project_root="/p",
            testing_type="e2e",
            spec_absolute_paths=[
                "/p/cypress/e2e/login.cy.js",
                "/p/cypress/e2e/admin/users.cy.js",
                "/p/cypress/smoke/boot.cy.js",
            ],
            spec_pattern=["cypress/e2e/login.cy.js", "cypress/**/*.cy.js"],
            sep="/",
        )

        assert [spec.relative_to_common_root for spec in result] == [
            "e2e/login.cy.js",
            "e2e/admin/users.cy.js",
            "smoke/boot.cy.js",
        ]

    def test_empty_match_set(self):
        assert matched_specs("/p", "e2e", [], "**/*.cy.js", sep="/") == []

    def test_component_spec_type(self):
        result = matched_specs(
            project_root="/p",
            testing_type="component",
            spec_absolute_paths=["/p/src/Button.cy.tsx", "/p/src/Card.cy.tsx"],
            spec_pattern="src/**/*.cy.tsx",
            sep="/",
        )

        assert {spec.spec_type for spec in result} == {"component"}

    def test_component_spec_outside_component_patterns_is_integration(self):
        result = matched_specs(
            project_root="/p",
            testing_type="component",
            spec_absolute_paths=["/p/src/Button.cy.tsx", "/p/cypress/e2e/home.cy.ts"],
            spec_pattern="**/*.cy.{ts,tsx}",
            component_patterns=["src/**/*.cy.tsx"],
            sep="/",
        )

        assert [spec.spec_type for spec in result] == ["component", "integration"]

    def test_name_is_path_relative_to_project_root(self):
        result = matched_specs("/p", "e2e", ["/p/a/b.cy.js", "/p/c.cy.js"], "**/*.cy.js", sep="/")

        assert [spec.name for spec in result] == ["a/b.cy.js", "c.cy.js"]


class TestTransformSpec:
    """Tests for transform_spec."""

    def test_normalizes_backslashes_to_posix(self):
        result = transform_spec(
            project_root="C:\\Windows\\Project",
            testing_type="e2e",
            absolute="C:\\Windows\\Project\\src\\spec.cy.js",
            common_root="C:\\Windows\\Project\\src",
            sep="\\",
        )

        assert result == SpecRecord(
            absolute="C:/Windows/Project/src/spec.cy.js",
            relative="src/spec.cy.js",
            relative_to_common_root="spec.cy.js",
            base_name="spec.cy.js",
            file_name="spec",
            file_extension=".js",
            spec_file_extension=".cy.js",
            name="src/spec.cy.js",
            spec_type="integration",
        )

    def test_to_dict_uses_camel_case_keys(self):
        result = transform_spec("/p", "e2e", "/p/src/spec.cy.js", "/p/src", sep="/")

        assert result.to_dict() == {
            "absolute": "/p/src/spec.cy.js",
            "relative": "src/spec.cy.js",
            "relativeToCommonRoot": "spec.cy.js",
            "baseName": "spec.cy.js",
            "fileName": "spec",
            "fileExtension": ".js",
            "specFileExtension": ".cy.js",
            "name": "src/spec.cy.js",
            "specType": "integration",
        }


@pytest.mark.parametrize(
    "base_name,expected",
    [
        ("login.cy.ts", ".cy.ts"),
        ("login.spec.js", ".spec.js"),
        ("login.test.tsx", ".test.tsx"),
        ("login-spec.js", "-spec.js"),
        ("login-test.js", "-test.js"),
        ("login_spec.js", ".js"),
        ("login.js", ".js"),
        ("app.spec.ts.js", ".spec.ts.js"),
        ("onboarding.cy.js.mp4", ".mp4"),
    ],
)
def test_spec_file_extension_of(base_name, expected):
    """Test recognized spec marker suffixes."""
    assert spec_file_extension_of(base_name) == expected
