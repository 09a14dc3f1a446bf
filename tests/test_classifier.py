from changed_dirs.classifier import (
    classify,
    first_level_directory,
    normalize_base_directory,
    normalize_path,
)


FILES = [
    "services/api/main.go",
    "services/api/util.go",
    "services/web/index.ts",
    "README.md",
]


def test_scenario_changed_service_dirs():
    assert set(classify(FILES, "services/", [])) == {"api", "web"}


def test_scenario_exclude_dir_without_trailing_slash():
    assert classify(FILES, "services", ["web"]) == ["api"]


def test_direct_child_of_base_is_ignored():
    assert classify(["services/config.yaml"], "services/", []) == []


def test_trailing_slash_invariance():
    files = FILES + ["services/db/schema.sql", "services/x.txt", "other/a/b"]
    assert classify(files, "services", ["db"]) == classify(files, "services/", ["db"])


def test_output_has_no_duplicates_and_keeps_first_seen_order():
    files = ["svc/b/1", "svc/a/1", "svc/b/2", "svc/a/2/3"]
    assert classify(files, "svc", []) == ["b", "a"]


def test_excluded_names_never_appear():
    files = ["svc/a/1", "svc/b/1", "svc/c/1"]
    out = classify(files, "svc", ["a", "c"])
    assert out == ["b"]
    assert not set(out) & {"a", "c"}


def test_classify_is_idempotent():
    assert classify(FILES, "services", []) == classify(FILES, "services", [])


def test_sibling_with_shared_prefix_is_not_under_base():
    assert classify(["services-old/api/main.go"], "services", []) == []


def test_base_directory_itself_is_skipped():
    assert classify(["services", "services/"], "services", []) == []


def test_backslash_and_dot_segments_are_normalized():
    files = ["services\\api\\main.go", "./services/web//index.ts", "services/./db/x.sql"]
    assert classify(files, ".\\services\\", []) == ["api", "web", "db"]


def test_base_comparison_ignores_case_but_keeps_name():
    assert classify(["Services/API/main.go"], "services", []) == ["API"]
    assert classify(["Services/API/main.go"], "services", [], case_sensitive=True) == []


def test_absolute_paths_are_made_relative_to_root():
    files = ["/work/repo/services/api/main.go", "/elsewhere/services/web/x.ts"]
    assert classify(files, "services", [], root="/work/repo") == ["api"]


def test_absolute_base_directory_under_root():
    assert classify(FILES, "/work/repo/services/", [], root="/work/repo") == ["api", "web"]


def test_root_base_directory_classifies_top_level_dirs():
    assert classify(FILES, ".", []) == ["services"]
    assert classify(FILES, "", ["services"]) == []


def test_malformed_inputs_are_omitted():
    files = [None, 42, "", "   ", "../services/api/x", "services/../../etc/passwd", "services/api/ok.go"]
    assert classify(files, "services", []) == ["api"]
    assert classify(None, "services", []) == []


def test_normalize_path():
    assert normalize_path("a\\b\\c.txt") == "a/b/c.txt"
    assert normalize_path("./a//b/") == "a/b"
    assert normalize_path("C:\\ws\\a\\b.txt", root="C:\\ws") == "a/b.txt"
    assert normalize_path("..") is None
    assert normalize_path(".") is None
    assert normalize_path(b"a/b") is None


def test_normalize_base_directory():
    assert normalize_base_directory("svc") == "svc/"
    assert normalize_base_directory("svc/") == "svc/"
    assert normalize_base_directory("svc\\nested\\") == "svc/nested/"
    assert normalize_base_directory("./") == ""


def test_first_level_directory():
    assert first_level_directory("svc/api/main.go", "svc/") == "api"
    assert first_level_directory("svc/api", "svc/") is None
    assert first_level_directory("svc", "svc/") is None
    assert first_level_directory("lib/api/main.go", "svc/") is None
