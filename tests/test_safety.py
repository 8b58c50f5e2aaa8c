"""
Tests for the crisis keyword gate.
"""

from youthmind.safety import CRISIS_KEYWORDS, CRISIS_RESOURCES, is_crisis


class TestCrisisGate:
    """The gate is a plain case-insensitive substring match."""

    def test_every_keyword_matches(self):
        """Each listed keyword alone is enough."""
        for keyword in CRISIS_KEYWORDS:
            assert is_crisis(keyword)

    def test_case_insensitive(self):
        assert is_crisis("I want to END MY LIFE")
        assert is_crisis("Feeling Suicidal tonight")

    def test_substring_not_word_boundary(self):
        """Substrings inside longer words still match."""
        assert is_crisis("thoughts of self-harming")
        assert is_crisis("I can't go on with this diet")

    def test_benign_text_passes(self):
        assert not is_crisis("I feel a bit stressed about exams")
        assert not is_crisis("")

    def test_resources_list_helplines(self):
        numbers = [helpline.number for helpline in CRISIS_RESOURCES.helplines]
        assert "9152987821" in numbers
        assert "1800-599-0019" in numbers
