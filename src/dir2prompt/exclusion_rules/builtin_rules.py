"""Built-in named exclusion rules for common project clutter."""

from typing import Dict

from .predicate_rules import PredicateExclusionRules, under_directory, with_suffix

ANDROID_STUDIO_ENTRIES = (".idea", "gradle", "gradlew", "gradlew.bat", "local.properties")


def _any_of(*predicates):
    return lambda path: any(predicate(path) for predicate in predicates)


def builtin_rules() -> Dict[str, PredicateExclusionRules]:
    """Create the built-in rules, keyed by display name, in display order.

    All predicates receive root-relative paths, so directory rules such as
    ``Node Modules`` only match at the top level of the chosen root.
    """
    return {
        "Node Modules": PredicateExclusionRules(under_directory("node_modules"), "node_modules/ at the root"),
        "Dist/Build": PredicateExclusionRules(
            _any_of(under_directory("dist"), under_directory("build")), "dist/ and build/ at the root"
        ),
        "Git Files": PredicateExclusionRules(
            _any_of(under_directory(".git"), with_suffix(".gitignore")), ".git/ and .gitignore files"
        ),
        "VSCode Config": PredicateExclusionRules(under_directory(".vscode"), ".vscode/ at the root"),
        "Android Studio": PredicateExclusionRules(
            _any_of(*(under_directory(name) for name in ANDROID_STUDIO_ENTRIES)),
            ".idea/, gradle/, gradlew wrappers and local.properties",
        ),
        "DFINITY/ICP": PredicateExclusionRules(
            _any_of(
                under_directory(".dfx"),
                under_directory(".mops"),
                with_suffix("dfx.json", "canister_ids.json", "mops.toml"),
            ),
            ".dfx/, .mops/ and canister configuration",
        ),
        "JS/TS Config": PredicateExclusionRules(
            _any_of(
                under_directory("public"),
                with_suffix("package.json", "tsconfig.json", "vite.config.ts"),
                lambda path: ".env" in path,
            ),
            "public/, package.json, tsconfig.json, vite.config.ts and .env files",
        ),
        "Lock Files": PredicateExclusionRules(with_suffix("package-lock.json", "yarn.lock"), "npm and yarn lock files"),
        "Markdown": PredicateExclusionRules(with_suffix(".md", case_sensitive=False), "Markdown documents"),
        "Compressed Files": PredicateExclusionRules(
            with_suffix(".rar", ".zip", case_sensitive=False), "zip and rar archives"
        ),
        "Image Files": PredicateExclusionRules(
            with_suffix(".svg", ".png", ".jpg", ".jpeg", ".gif", ".webp", case_sensitive=False), "Image files"
        ),
    }
