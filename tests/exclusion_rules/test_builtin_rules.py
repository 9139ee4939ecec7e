"""Tests for the built-in named exclusion rules."""

import pytest

from dir2prompt.exclusion_rules.builtin_rules import builtin_rules
from dir2prompt.exclusion_rules.predicate_rules import PredicateExclusionRules, under_directory, with_suffix


@pytest.fixture
def rules():
    return builtin_rules()


def test_rule_names_in_display_order(rules):
    assert list(rules) == [
        "Node Modules",
        "Dist/Build",
        "Git Files",
        "VSCode Config",
        "Android Studio",
        "DFINITY/ICP",
        "JS/TS Config",
        "Lock Files",
        "Markdown",
        "Compressed Files",
        "Image Files",
    ]


def test_every_rule_has_description(rules):
    assert all(rule.description for rule in rules.values())


@pytest.mark.parametrize(
    "name,path,expected",
    [
        ("Node Modules", "node_modules", True),
        ("Node Modules", "node_modules/react/index.js", True),
        ("Node Modules", "packages/app/node_modules/x.js", False),
        ("Dist/Build", "dist/bundle.js", True),
        ("Dist/Build", "build", True),
        ("Dist/Build", "builder/main.py", False),
        ("Git Files", ".git/HEAD", True),
        ("Git Files", "web/.gitignore", True),
        ("Git Files", ".github/workflows/ci.yml", False),
        ("VSCode Config", ".vscode/settings.json", True),
        ("Android Studio", ".idea/workspace.xml", True),
        ("Android Studio", "gradle", True),
        ("Android Studio", "gradle/wrapper/gradle-wrapper.properties", True),
        ("Android Studio", "gradlew.bat", True),
        ("Android Studio", "app/build.gradle", False),
        ("DFINITY/ICP", ".dfx/local/canisters.json", True),
        ("DFINITY/ICP", "backend/dfx.json", True),
        ("DFINITY/ICP", "mops.toml", True),
        ("JS/TS Config", "public/index.html", True),
        ("JS/TS Config", "web/package.json", True),
        ("JS/TS Config", "config/.env.local", True),
        ("JS/TS Config", "src/environment.ts", False),
        ("Lock Files", "package-lock.json", True),
        ("Lock Files", "web/yarn.lock", True),
        ("Lock Files", "Cargo.lock", False),
        ("Markdown", "docs/GUIDE.MD", True),
        ("Markdown", "docs/guide.mdx", False),
        ("Compressed Files", "release.ZIP", True),
        ("Compressed Files", "backup.rar", True),
        ("Image Files", "assets/logo.PNG", True),
        ("Image Files", "icons/menu.svg", True),
        ("Image Files", "src/image.ts", False),
    ],
)
def test_rule_semantics(rules, name, path, expected):
    assert rules[name].exclude(path) is expected


def test_builtin_rules_are_fresh_objects():
    assert builtin_rules()["Markdown"] is not builtin_rules()["Markdown"]


def test_under_directory_strips_trailing_slash():
    predicate = under_directory("gradle/")
    assert predicate("gradle")
    assert predicate("gradle/wrapper.jar")
    assert not predicate("gradlew")


def test_with_suffix_case_sensitivity():
    assert not with_suffix(".md")("README.MD")
    assert with_suffix(".md", case_sensitive=False)("README.MD")


def test_predicate_rule_requires_callable():
    with pytest.raises(TypeError):
        PredicateExclusionRules("*.md")
