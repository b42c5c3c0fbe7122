"""Test configuration and utilities for the scan report test suite."""

import tempfile
import shutil
from pathlib import Path
from typing import Dict, Any

import pytest
import yaml

from scan_report.reporting.models import AlertNode, Context, SiteNode
from scan_report.reporting.session import SessionSnapshot


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir) -> Dict[str, Any]:
    """Basic test configuration."""
    return {
        'system': {
            'environment': 'testing',
            'logs_dir': str(temp_dir / 'logs')
        },
        'logging': {
            'level': 'ERROR',  # Reduce noise in tests
            'format': '%(message)s',
            'file_logging': False,
            'file_rotation': False,
            'max_file_size': '1MB',
            'backup_count': 1
        },
        'reports': {
            'title': 'Test Report',
            'description': 'Generated by the test suite',
            'template': 'simple-html',
            'report_directory': str(temp_dir / 'reports'),
            'template_directory': str(temp_dir / 'templates'),
            'report_name_pattern': '{site}-report',
            'display_report': False,
            'included_risks': [0, 1, 2, 3],
            'included_confidences': [0, 1, 2, 3, 4]
        }
    }


@pytest.fixture
def config_file(temp_dir, test_config):
    """Create temporary configuration file."""
    config_file = temp_dir / 'test_config.yml'
    with open(config_file, 'w') as f:
        yaml.dump(test_config, f)

    return config_file


@pytest.fixture
def template_dir(temp_dir):
    """Template directory with one HTML and one JSON template."""
    base = temp_dir / 'templates'

    html = base / 'simple-html'
    html.mkdir(parents=True)
    (html / 'template.yaml').write_text(
        "name: Simple HTML\nformat: html\ndescription: Plain alert list\n"
    )
    (html / 'report.html').write_text(
        "<h1>{{ report.title }}</h1>\n"
        "{% for site in report.sites %}<p>{{ site }}</p>\n{% endfor %}"
        "{% for leaf in data.root.iter_leaves() %}"
        "<li>{{ leaf.name }} {{ leaf.risk | risk_name }} {{ leaf.confidence | confidence_name }}</li>\n"
        "{% endfor %}"
    )

    json_template = base / 'simple-json'
    json_template.mkdir()
    (json_template / 'template.yaml').write_text(
        "name: Simple JSON\nformat: json\nfile: data.json.j2\n"
    )
    (json_template / 'data.json.j2').write_text("{{ report | tojson }}")

    (temp_dir / 'reports').mkdir(exist_ok=True)
    return base


@pytest.fixture
def site_tree() -> SiteNode:
    """Two sites below the synthetic root."""
    return SiteNode('Sites', (
        SiteNode('https://a.example'),
        SiteNode('https://b.example'),
    ))


@pytest.fixture
def alert_tree() -> AlertNode:
    """Alert tree with one category per alert type.

    XSS: one high/medium alert on site a, one low/low alert on site b.
    Info Leak: a single informational/confirmed alert on site a.
    """
    return AlertNode('Alerts', category=True, children=(
        AlertNode('XSS', category=True, children=(
            AlertNode('XSS', risk=3, confidence=2, site='https://a.example',
                      uri='https://a.example/search', alert_id=1),
            AlertNode('XSS', risk=1, confidence=1, site='https://b.example',
                      uri='https://b.example/form', alert_id=2),
        )),
        AlertNode('Info Leak', category=True, children=(
            AlertNode('Info Leak', risk=0, confidence=4, site='https://a.example',
                      uri='https://a.example/', alert_id=3),
        )),
    ))


@pytest.fixture
def contexts():
    return (
        Context('Default Context', 1, ('https://a.example.*',)),
        Context('Staging', 2, ('https://b.example.*',)),
    )


@pytest.fixture
def session(contexts, site_tree, alert_tree) -> SessionSnapshot:
    return SessionSnapshot(contexts=contexts, site_root=site_tree, alert_root=alert_tree)


@pytest.fixture
def session_data() -> Dict[str, Any]:
    """Session export mapping equivalent to the ``session`` fixture."""
    return {
        'contexts': [
            {'name': 'Default Context', 'id': 1, 'include': ['https://a.example.*']},
            {'name': 'Staging', 'id': 2, 'include': ['https://b.example.*']},
        ],
        'sites': ['https://a.example', {'name': 'https://b.example', 'children': ['form']}],
        'alerts': [
            {'name': 'XSS', 'children': [
                {'name': 'XSS', 'risk': 'High', 'confidence': 'Medium',
                 'site': 'https://a.example', 'uri': 'https://a.example/search', 'id': 1},
                {'name': 'XSS', 'risk': 1, 'confidence': 1,
                 'site': 'https://b.example', 'uri': 'https://b.example/form', 'id': 2},
            ]},
            {'name': 'Info Leak', 'children': [
                {'name': 'Info Leak', 'risk': 'informational', 'confidence': 'confirmed',
                 'site': 'https://a.example', 'uri': 'https://a.example/', 'id': 3},
            ]},
        ]
    }


@pytest.fixture
def session_file(temp_dir, session_data):
    session_file = temp_dir / 'session.yml'
    with open(session_file, 'w') as f:
        yaml.dump(session_data, f)

    return session_file
