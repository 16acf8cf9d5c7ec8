"""Tests for show-ref pattern matching: tail match on '/' boundaries."""

import unittest

from showref.matching import pattern_matches, ref_matches


class TestPatternMatches(unittest.TestCase):
    def test_exact_name(self) -> None:
        self.assertTrue(pattern_matches("refs/heads/main", "refs/heads/main"))

    def test_last_component(self) -> None:
        self.assertTrue(pattern_matches("refs/heads/main", "main"))

    def test_trailing_components(self) -> None:
        self.assertTrue(pattern_matches("refs/heads/main", "heads/main"))

    def test_partial_component_does_not_match(self) -> None:
        self.assertFalse(pattern_matches("refs/heads/main", "ain"))
        self.assertFalse(pattern_matches("refs/heads/mymain", "main"))

    def test_prefix_is_not_a_match(self) -> None:
        self.assertFalse(pattern_matches("refs/heads/main", "refs/heads"))

    def test_pattern_longer_than_name(self) -> None:
        self.assertFalse(pattern_matches("main", "refs/heads/main"))

    def test_head_pseudo_ref(self) -> None:
        self.assertTrue(pattern_matches("HEAD", "HEAD"))
        self.assertFalse(pattern_matches("HEAD", "EAD"))

    def test_boundary_rule_matches_definition(self) -> None:
        names = ["refs/heads/main", "refs/tags/v1.0", "refs/remotes/origin/HEAD", "HEAD", "a/b"]
        patterns = ["main", "v1.0", "1.0", "origin/HEAD", "HEAD", "b", "a/b", "/b", "", "refs/heads/main"]
        for n in names:
            for p in patterns:
                expected = n.endswith(p) and (len(p) == len(n) or n[len(n) - len(p) - 1] == "/")
                self.assertEqual(pattern_matches(n, p), expected, (n, p))


class TestRefMatches(unittest.TestCase):
    def test_no_patterns_matches_everything(self) -> None:
        self.assertTrue(ref_matches("refs/heads/main", []))
        self.assertTrue(ref_matches("anything", ()))

    def test_any_pattern_is_enough(self) -> None:
        self.assertTrue(ref_matches("refs/tags/v1", ["main", "v1"]))

    def test_no_pattern_matches(self) -> None:
        self.assertFalse(ref_matches("refs/tags/v1", ["main", "1"]))


if __name__ == "__main__":
    unittest.main()
