from pathlib import Path

import pytest

from postmatter.build import (
    DEFAULT_CONFIG,
    BuildError,
    build_site,
    load_config,
    page_path,
)
from postmatter.document import Document, Metadata


def create_project(tmp_path: Path) -> Path:
    project = tmp_path
    (project / "content" / "blog").mkdir(parents=True)
    (project / "templates").mkdir()
    (project / "postmatter.yaml").write_text(
        "output_dir: public\ndata:\n  site: My Blog\n", encoding="utf-8"
    )
    (project / "templates" / "blog-post.html.jinja").write_text(
        "<title>{{ title }} | {{ data.site }}</title>{{ content }}", encoding="utf-8"
    )
    (project / "content" / "blog" / "2023-12-04-angular-signals.md").write_text(
        "---\ntemplateKey: blog-post\ntitle: Signals\n"
        "date: 2023-12-04T16:47:27.733Z\n---\n## Intro\n\nHello\n",
        encoding="utf-8",
    )
    (project / "content" / "_draft-post.md").write_text(
        "---\ntemplateKey: blog-post\ntitle: Draft\n---\nSoon\n", encoding="utf-8"
    )
    return project


def test_load_config_defaults(tmp_path):
    assert load_config(tmp_path) == DEFAULT_CONFIG


def test_load_config_merges_file(tmp_path):
    (tmp_path / "postmatter.yaml").write_text("output_dir: site\n", encoding="utf-8")
    config = load_config(tmp_path)
    assert config["output_dir"] == "site"
    assert config["content_dir"] == "content"


def test_load_config_ignores_non_mapping(tmp_path):
    (tmp_path / "postmatter.yaml").write_text("- a\n- b\n", encoding="utf-8")
    assert load_config(tmp_path) == DEFAULT_CONFIG


def test_build_site_writes_pages(tmp_path):
    project = create_project(tmp_path)
    result = build_site(project)
    assert result.ok
    assert result.output_dir == project / "public"
    page = project / "public" / "blog" / "angular-signals" / "index.html"
    html = page.read_text(encoding="utf-8")
    assert "<title>Signals | My Blog</title>" in html
    assert '<h2 id="intro">Intro</h2>' in html
    assert not (project / "public" / "draft-post").exists()


def test_build_site_include_drafts(tmp_path):
    project = create_project(tmp_path)
    result = build_site(project, include_drafts=True)
    assert len(result.documents) == 2
    assert (project / "public" / "draft-post" / "index.html").exists()


def test_build_site_drafts_from_config(tmp_path):
    project = create_project(tmp_path)
    (project / "postmatter.yaml").write_text("include_drafts: true\n", encoding="utf-8")
    result = build_site(project)
    assert len(result.documents) == 2


def test_build_site_collects_malformed_files(tmp_path):
    project = create_project(tmp_path)
    broken = project / "content" / "blog" / "broken.md"
    broken.write_text("---\ndate: not-a-date\n---\n", encoding="utf-8")
    result = build_site(project)
    assert not result.ok
    assert [f.source_path for f in result.failures] == [broken]
    assert (project / "public" / "blog" / "angular-signals" / "index.html").exists()


def test_build_site_output_override_and_clean(tmp_path):
    project = create_project(tmp_path)
    out = tmp_path / "elsewhere"
    out.mkdir()
    (out / "stale.html").write_text("old", encoding="utf-8")
    build_site(project, output_dir_override=out)
    assert not (out / "stale.html").exists()
    assert (out / "blog" / "angular-signals" / "index.html").exists()


def test_build_site_keeps_output_when_not_cleaning(tmp_path):
    project = create_project(tmp_path)
    out = project / "public"
    out.mkdir()
    (out / "keep.txt").write_text("x", encoding="utf-8")
    build_site(project, clean_output=False)
    assert (out / "keep.txt").exists()


def test_build_site_missing_content_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        build_site(tmp_path)


def test_build_site_template_error(tmp_path):
    project = create_project(tmp_path)
    (project / "templates" / "blog-post.html.jinja").write_text(
        "{% for %}", encoding="utf-8"
    )
    with pytest.raises(BuildError) as excinfo:
        build_site(project)
    assert excinfo.value.source_path.name == "2023-12-04-angular-signals.md"
    assert "Template syntax error" in excinfo.value.message


def test_build_site_custom_renderer(tmp_path):
    project = create_project(tmp_path)

    class UpperRenderer:
        def render(self, body):
            return body.upper()

    build_site(project, renderer=UpperRenderer())
    html = (project / "public" / "blog" / "angular-signals" / "index.html").read_text(
        encoding="utf-8"
    )
    assert "HELLO" in html
def test_page_path_uses_slug(tmp_path):
    document = Document(Metadata(), "", Path("content/2024-01-15-Hello World.md"))
    assert page_path(tmp_path, document) == tmp_path / "hello-world" / "index.html"
    assert page_path(tmp_path, Document(Metadata(), "")) == tmp_path / "index.html"


def test_page_path_keeps_folders(tmp_path):
    content = Path("content")
    nested = Document(Metadata(), "", content / "Blog Posts" / "2024-01-15-post.md")
    assert page_path(tmp_path, nested, content) == (
        tmp_path / "blog-posts" / "post" / "index.html"
    )
    index = Document(Metadata(), "", content / "blog" / "index.md")
    assert page_path(tmp_path, index, content) == tmp_path / "blog" / "index.html"
    root = Document(Metadata(), "", content / "index.md")
    assert page_path(tmp_path, root, content) == tmp_path / "index.html"


def test_build_site_same_name_in_different_folders(tmp_path):
    project = create_project(tmp_path)
    for folder in ("a", "b"):
        (project / "content" / folder).mkdir()
        (project / "content" / folder / "post.md").write_text(
            f"---\ntitle: {folder}\n---\n", encoding="utf-8"
        )
    result = build_site(project)
    assert len(result.documents) == 3
    for folder in ("a", "b"):
        assert (project / "public" / folder / "post" / "index.html").exists()


def test_build_site_rejects_output_collision(tmp_path):
    project = create_project(tmp_path)
    (project / "content" / "blog" / "2024-01-15-angular-signals.md").write_text(
        "---\ntitle: Again\n---\n", encoding="utf-8"
    )
    with pytest.raises(BuildError) as excinfo:
        build_site(project)
    assert "already written" in excinfo.value.message


def test_build_site_writes_good_file_next_to_content_errors(tmp_path):
    project = create_project(tmp_path)
    blog = project / "content" / "blog"
    (blog / "bad-date.md").write_text(
        "---\ntitle: Bad\ndate: 2023-02-30\n---\n", encoding="utf-8"
    )
    (blog / "bad-bytes.md").write_bytes(b"---\ntitle: \xff\xfe\n---\n")
    result = build_site(project)
    assert sorted(f.source_path.name for f in result.failures) == [
        "bad-bytes.md",
        "bad-date.md",
    ]
    assert [d.metadata.title for d in result.documents] == ["Signals"]
    assert (project / "public" / "blog" / "angular-signals" / "index.html").exists()
