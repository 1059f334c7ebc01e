from tests import _config
import pytest
import typing as t

import tinysite

BASE_HTML = """\
{% block head %}<title>{% block title %}site{% endblock %}</title>{% endblock %}
<main>{% block content %}{% endblock %}</main>
"""
INDEX_HTML = """\
{% extends "base.html" %}
{% block title %}Home{% endblock %}
{% block content %}<h1>Index</h1>{% endblock %}
"""
BLOG_HTML = """\
{% extends "base.html" %}
{% block content %}<h1>Blog</h1>{% endblock %}
"""
APP_JS = b"console.log('hello');\n"


def pytest_configure(config: pytest.Config):
    _config.verbose = t.cast(int, config.getoption("verbose")) or 0


@pytest.fixture
def site_dirs(tmp_path):
    """A template dir holding base/index/blog pages and a static dir with app.js."""
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "base.html").write_text(BASE_HTML)
    (templates / "index.html").write_text(INDEX_HTML)
    (templates / "blog.html").write_text(BLOG_HTML)
    static = tmp_path / "static" / "public"
    static.mkdir(parents=True)
    (static / "app.js").write_bytes(APP_JS)
    return templates, static


@pytest.fixture
def site_env(site_dirs) -> tinysite.Env:
    templates, static = site_dirs
    return tinysite.Env(template_dir=str(templates), static_dir=str(static))


@pytest.fixture
def site(site_env) -> tinysite.Router:
    return tinysite.create_app(site_env)
