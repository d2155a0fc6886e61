"""End-to-end tests for eodoc.engine."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from eodoc.config import DocsConfig
from eodoc.engine import DocsEngine
from eodoc.transform import TransformError
from tests._fixtures.samples import (
    APP_XMIR,
    BROKEN_XMIR,
    INVALID_UTF8_XMIR,
    LATIN1_XMIR,
    MINIMAL_XMIR,
    NOT_DOCS_XMIR,
    UTIL_XMIR,
)
from tests._fixtures.target_builder import TargetBuilder


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


def test_generates_html_files_for_files_and_packages(target_builder: TargetBuilder) -> None:
    target_builder.write({"foo/bar/test1.xmir": MINIMAL_XMIR, "foo/bar/test2.xmir": MINIMAL_XMIR})

    result = target_builder.run()

    docs = target_builder.docs
    assert result.output_dir == docs
    for relative in (
        "foo/bar/test1.html",
        "foo/bar/test2.html",
        "package_foo.bar.html",
        "packages.html",
        "styles.css",
        "summary.xml",
    ):
        assert (docs / relative).is_file(), relative
    assert result.artifacts == 2
    assert result.packages == ["foo.bar"]


def test_generates_documentation_comments(target_builder: TargetBuilder) -> None:
    target_builder.write({"foo/test1.xmir": APP_XMIR, "foo/test2.xmir": UTIL_XMIR})

    target_builder.run()

    page = target_builder.read("foo/test1.html")
    assert "This is documentation for app" in page
    assert "First docs line" in page
    assert "Second docs line" in page

    for aggregate in ("package_foo.html", "packages.html"):
        content = target_builder.read(aggregate)
        assert "This is documentation for app" in content
        assert "Second docs line" in content
        assert "Second test app" in content


def test_does_not_render_unattached_comments(target_builder: TargetBuilder) -> None:
    target_builder.write({"test.xmir": NOT_DOCS_XMIR})

    target_builder.run()

    assert "Not docs" not in target_builder.read("test.html")


def test_root_level_artifact_still_gets_global_page(target_builder: TargetBuilder) -> None:
    target_builder.write({"main.xmir": APP_XMIR})

    result = target_builder.run()

    assert "This is documentation for app" in target_builder.read("packages.html")
    assert not (target_builder.docs / "package_.html").exists()
    assert '<package name="">' in target_builder.read("summary.xml")
    assert result.packages == [""]


def test_package_pages_hold_only_their_own_fragments(target_builder: TargetBuilder) -> None:
    target_builder.write({"com/example/app.xmir": APP_XMIR, "org/test/util.xmir": UTIL_XMIR})

    target_builder.run()

    com = target_builder.read("package_com.example.html")
    org = target_builder.read("package_org.test.html")
    assert "This is documentation for app" in com
    assert "Second test app" not in com
    assert "Second test app" in org
    assert "This is documentation for app" not in org

    index = target_builder.read("packages.html")
    assert index.index("This is documentation for app") < index.index("Second test app")


def test_generates_xml_summary(target_builder: TargetBuilder) -> None:
    target_builder.write({"com/example/app.xmir": APP_XMIR, "org/test/util.xmir": UTIL_XMIR})

    result = target_builder.run()

    xml = result.summary_path.read_text(encoding="utf-8")
    assert result.summary_path == target_builder.docs / "summary.xml"
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert "<eodoc>" in xml and "</eodoc>" in xml
    assert '<package name="com.example">' in xml
    assert '<package name="org.test">' in xml
    assert xml.count("<object>") == 2
    for section in ("<metadata>", "<objects>", "<sheets>"):
        assert section in xml
    assert "<author>eo-parser</author>" in xml
    assert "<version>0.58.6</version>" in xml
    assert '<o name="app"' in xml
    assert '<o name="app2"' in xml
    assert "<sheet>validate-before-stars</sheet>" in xml
    assert "<sheet>resolve-before-stars</sheet>" in xml


def test_escaped_source_values_stay_escaped(target_builder: TargetBuilder) -> None:
    target_builder.write({"x/evil.xmir": '<object><o name="&lt;script&gt;" line="1"/></object>'})

    target_builder.run()

    xml = target_builder.read("summary.xml")
    assert "<script>" not in xml
    assert "&amp;lt;script&amp;gt;" in xml


def test_rerun_is_idempotent(target_builder: TargetBuilder) -> None:
    target_builder.write({"a/one.xmir": APP_XMIR, "b/two.xmir": UTIL_XMIR, "three.xmir": MINIMAL_XMIR})

    target_builder.run()
    first = _snapshot(target_builder.docs)
    target_builder.run()

    assert _snapshot(target_builder.docs) == first


def test_transform_failure_aborts_run(target_builder: TargetBuilder) -> None:
    target_builder.write({"ok/good.xmir": APP_XMIR, "pkg/broken.xmir": BROKEN_XMIR})

    with pytest.raises(TransformError, match="pkg/broken.xmir"):
        target_builder.run()

    assert not (target_builder.docs / "summary.xml").exists()


def test_skip_policy_renders_placeholder(target_builder: TargetBuilder) -> None:
    target_builder.write({"ok/good.xmir": APP_XMIR, "pkg/broken.xmir": BROKEN_XMIR})

    result = target_builder.run(DocsConfig(on_transform_error="skip"))

    assert result.failed == ["pkg/broken.xmir"]
    assert "unavailable" in target_builder.read("pkg/broken.html")
    xml = target_builder.read("summary.xml")
    assert '<package name="pkg">' in xml
    assert "<author>eo-parser</author>" in xml


def test_missing_input_directory_is_fatal(tmp_path: Path) -> None:
    (tmp_path / "target").mkdir()

    with pytest.raises(FileNotFoundError):
        DocsEngine().run(tmp_path / "target")


def test_config_file_controls_directories(target_builder: TargetBuilder) -> None:
    (target_builder.root / ".eodoc.yml").write_text(
        "docs:\n  output_dir: site\n",
        encoding="utf-8",
    )
    target_builder.write({"foo/app.xmir": APP_XMIR})

    result = target_builder.run()

    assert result.output_dir == target_builder.root / "site"
    assert (target_builder.root / "site" / "foo" / "app.html").is_file()
    assert not target_builder.docs.exists()


def test_stylesheet_link_present_on_every_page(target_builder: TargetBuilder) -> None:
    target_builder.write({"foo/bar/app.xmir": APP_XMIR})

    target_builder.run()

    assert 'href="../../styles.css"' in target_builder.read("foo/bar/app.html")
    assert 'href="styles.css"' in target_builder.read("package_foo.bar.html")
    assert 'href="styles.css"' in target_builder.read("packages.html")


def test_declared_encoding_is_honoured(target_builder: TargetBuilder) -> None:
    target_builder.write_bytes("pkg/latin.xmir", LATIN1_XMIR)

    result = target_builder.run()

    assert result.failed == []
    assert "Café docs" in target_builder.read("pkg/latin.html")
    assert "Café docs" in target_builder.read("package_pkg.html")
    xml = target_builder.read("summary.xml")
    assert '<o name="cafe"' in xml
    assert "<author>René</author>" in xml
    assert "<version>0.58.6</version>" in xml


def test_undecodable_artifact_fails_with_its_name(target_builder: TargetBuilder) -> None:
    target_builder.write_bytes("pkg/bad.xmir", INVALID_UTF8_XMIR)

    with pytest.raises(TransformError, match="pkg/bad.xmir"):
        target_builder.run()


def test_undecodable_artifact_is_skipped_with_facts_kept(target_builder: TargetBuilder) -> None:
    target_builder.write_bytes("pkg/bad.xmir", INVALID_UTF8_XMIR)

    result = target_builder.run(DocsConfig(on_transform_error="skip"))

    assert result.failed == ["pkg/bad.xmir"]
    xml = target_builder.read("summary.xml")
    assert "<author>x</author>" in xml
    assert 'name="bad�"' in xml


def test_root_artifact_named_like_index_logs_collision(
    target_builder: TargetBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    target_builder.write({"packages.xmir": APP_XMIR})

    with caplog.at_level(logging.WARNING, logger="eodoc"):
        target_builder.run()

    assert "packages.html" in caplog.text
    assert "replaces the artifact page" in caplog.text
    assert "Packages documentation" in target_builder.read("packages.html")
