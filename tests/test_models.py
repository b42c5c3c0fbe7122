"""Tests for report data models."""

import pytest

from scan_report.core.exceptions import InvalidFilterCriteriaError
from scan_report.reporting.models import (
    RiskLevel, ConfidenceLevel, AlertNode, FilterCriteria, ReportData,
    RISK_ORDINALS, CONFIDENCE_ORDINALS, risk_label, confidence_label
)


class TestLevels:

    def test_labels(self):
        assert RiskLevel.INFORMATIONAL.label == 'Informational'
        assert RiskLevel.HIGH.label == 'High'
        assert ConfidenceLevel.FALSE_POSITIVE.label == 'False Positive'
        assert ConfidenceLevel.CONFIRMED.label == 'Confirmed'

    @pytest.mark.parametrize('value, expected', [
        (3, 3),
        ('2', 2),
        ('high', 3),
        ('Medium', 2),
        ('info', 0),
        ('informational', 0),
        ('critical', -1),
        (True, -1),
        (None, -1),
    ])
    def test_parse_risk(self, value, expected):
        assert RiskLevel.parse(value) == expected

    @pytest.mark.parametrize('value, expected', [
        ('false positive', 0),
        ('False-Positive', 0),
        ('falsepositive', 0),
        ('confirmed', 4),
        ('4', 4),
        ('sure', -1),
    ])
    def test_parse_confidence(self, value, expected):
        assert ConfidenceLevel.parse(value) == expected

    def test_unknown_labels(self):
        assert risk_label(-1) == 'Unknown'
        assert confidence_label(9) == 'Unknown'
        assert risk_label(1) == 'Low'

    def test_ordinal_sets(self):
        assert RISK_ORDINALS == frozenset({0, 1, 2, 3})
        assert CONFIDENCE_ORDINALS == frozenset({0, 1, 2, 3, 4})


class TestAlertNode:

    def test_leaf_and_category(self):
        leaf = AlertNode('XSS', risk=3, confidence=2)
        empty_category = AlertNode('XSS', category=True)

        assert leaf.is_leaf
        assert not empty_category.is_leaf
        assert not AlertNode('Group', children=[leaf]).is_leaf

    def test_children_become_tuple(self):
        node = AlertNode('Group', category=True, children=[AlertNode('a')])

        assert isinstance(node.children, tuple)
        assert node.child_count == 1

    def test_iter_leaves_in_order(self, alert_tree):
        ids = [leaf.alert_id for leaf in alert_tree.iter_leaves()]

        assert ids == [1, 2, 3]
        assert alert_tree.count_alerts() == 3

    def test_copies_keep_fields(self, alert_tree):
        xss = alert_tree.children[0]
        copy = xss.copy_without_children()

        assert copy.name == 'XSS'
        assert copy.category
        assert copy.children == ()
        assert xss.child_count == 2

    def test_to_dict(self):
        leaf = AlertNode('XSS', risk=3, confidence=4, site='https://a.example', alert_id=7)
        data = leaf.to_dict()

        assert data['risk_name'] == 'High'
        assert data['confidence_name'] == 'Confirmed'
        assert data['children'] == []
        assert data['alert_id'] == 7


class TestFilterCriteria:

    def test_defaults_include_everything(self):
        criteria = FilterCriteria()

        assert criteria.risks == RISK_ORDINALS
        assert criteria.confidences == CONFIDENCE_ORDINALS
        assert criteria.sites == ()
        assert criteria.contexts == frozenset()

    def test_sites_deduplicated_in_order(self):
        criteria = FilterCriteria(sites=['b', 'a', 'b'])

        assert criteria.sites == ('b', 'a')

    def test_empty_severity_sets_allowed(self):
        criteria = FilterCriteria(risks=[], confidences=[])

        assert criteria.risks == frozenset()

    def test_out_of_range_risk_rejected(self):
        with pytest.raises(InvalidFilterCriteriaError) as exc_info:
            FilterCriteria(risks=[0, 4])

        assert exc_info.value.invalid_values == [4]
        assert exc_info.value.field_name == 'risks'

    def test_unknown_confidence_rejected(self):
        with pytest.raises(InvalidFilterCriteriaError):
            FilterCriteria(confidences=[-1])

    def test_bool_rejected(self):
        with pytest.raises(InvalidFilterCriteriaError):
            FilterCriteria(risks=[True])


class TestReportData:

    def test_inclusion_queries(self, alert_tree):
        data = ReportData('T', '', (), ('https://a.example',), {2, 3}, {0}, alert_tree)

        assert data.is_include_risk(3)
        assert not data.is_include_risk(0)
        assert data.is_include_confidence(0)
        assert not data.is_include_confidence(4)

    def test_has_alerts(self, alert_tree):
        empty_root = AlertNode('Alerts', category=True)

        assert ReportData('T', '', (), (), set(), set(), alert_tree).has_alerts
        assert not ReportData('T', '', (), (), set(), set(), empty_root).has_alerts

    def test_summary_statistics(self, alert_tree, contexts):
        data = ReportData('T', '', contexts, ('https://a.example', 'https://b.example'),
                          RISK_ORDINALS, CONFIDENCE_ORDINALS, alert_tree)

        stats = data.get_summary_statistics()

        assert stats['total_alerts'] == 3
        assert stats['risk_breakdown'] == {
            'Informational': 1, 'Low': 1, 'Medium': 0, 'High': 1
        }
        assert stats['sites'] == 2
        assert stats['contexts'] == 2

    def test_to_dict(self, alert_tree, contexts):
        data = ReportData('Title', 'Desc', contexts, ('https://a.example',),
                          {3, 1}, {2}, alert_tree)

        result = data.to_dict()

        assert result['title'] == 'Title'
        assert result['contexts'] == ['Default Context', 'Staging']
        assert result['risks'] == [1, 3]
        assert result['alerts']['name'] == 'Alerts'
        assert len(result['alerts']['children']) == 2
        assert result['statistics']['total_alerts'] == 3
