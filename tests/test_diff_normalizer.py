"""Test masking of volatile tokens in unified diffs."""

import unittest

from branchsweep.diff_normalizer import extract_diff, normalize_diff, normalize_line

MODIFY_DIFF = """diff --git a/src/auth.py b/src/auth.py
index 3f2a1bc..9e8d7f6 100644
--- a/src/auth.py
+++ b/src/auth.py
@@ -41,7 +41,8 @@ def login(user):
     user.check()
-    return None
+    user.refresh()
+    return user
"""


class TestNormalizeDiff(unittest.TestCase):
    """Test normalize_diff and its per-line rules."""

    def test_index_hashes_replaced_mode_kept(self):
        """Test that a modify index line gets placeholder hashes and keeps its mode."""
        self.assertEqual(
            normalize_line("index 3f2a1bc..9e8d7f6 100644"), "index 1111111..2222222 100644"
        )

    def test_index_line_without_mode(self):
        """Test index lines of mode changes, which carry no trailing mode."""
        self.assertEqual(normalize_line("index 3f2a1bc..9e8d7f6"), "index 1111111..2222222")

    def test_new_file_stays_distinguishable(self):
        """Test that a new-file index line keeps its all-zero source hash."""
        self.assertEqual(normalize_line("index 0000000..9e8d7f6"), "index 0000000..1111111")
        self.assertNotEqual(
            normalize_line("index 0000000..9e8d7f6"), normalize_line("index 3f2a1bc..9e8d7f6")
        )

    def test_deleted_file_stays_distinguishable(self):
        """Test that a deleted-file index line keeps its all-zero destination hash."""
        self.assertEqual(
            normalize_line("index 3f2a1bc..0000000000000000000000000000000000000000"),
            "index 1111111..0000000",
        )

    def test_hunk_header_collapsed_context_kept(self):
        """Test that hunk positions are masked but the function context survives."""
        self.assertEqual(
            normalize_line("@@ -41,7 +41,8 @@ def login(user):"), "@@ -0,0 +0,0 @@ def login(user):"
        )
        self.assertEqual(normalize_line("@@ -1 +1 @@"), "@@ -0,0 +0,0 @@")

    def test_content_lines_untouched(self):
        """Test that content lines pass through even when they look like headers."""
        samples = ("+index abc1234..def5678 100644", "-@@ -1,2 +1,2 @@", " return user", "--- a/x")
        for line in samples:
            self.assertEqual(normalize_line(line), line)

    def test_rebased_diffs_compare_equal(self):
        """Test that diffs differing only in blob hashes and line offsets normalize identically."""
        rebased = MODIFY_DIFF.replace("3f2a1bc..9e8d7f6", "aaaaaaa..bbbbbbb").replace(
            "@@ -41,7 +41,8 @@", "@@ -57,7 +57,8 @@"
        )
        self.assertNotEqual(MODIFY_DIFF, rebased)
        self.assertEqual(normalize_diff(MODIFY_DIFF), normalize_diff(rebased))

    def test_content_changes_survive(self):
        """Test that different added lines still produce different normalized diffs."""
        other = MODIFY_DIFF.replace("+    return user", "+    return None")
        self.assertNotEqual(normalize_diff(MODIFY_DIFF), normalize_diff(other))

    def test_idempotent(self):
        """Test that normalizing twice equals normalizing once."""
        samples = [
            MODIFY_DIFF,
            "",
            "index 0000000..abcdef1\n",
            "index abcdef1..0000000 100755\r\n@@ -3 +0,0 @@\r\n-gone\r\n",
            "no diff here",
        ]
        for sample in samples:
            once = normalize_diff(sample)
            self.assertEqual(normalize_diff(once), once)

    def test_line_endings_preserved(self):
        """Test that CRLF endings and the trailing newline are kept."""
        result = normalize_diff("@@ -1,2 +1,2 @@\r\n-a\r\n+b\r\n")
        self.assertEqual(result, "@@ -0,0 +0,0 @@\r\n-a\r\n+b\r\n")


class TestExtractDiff(unittest.TestCase):
    """Test extraction of the diff from git show output."""

    def test_drops_header_and_message(self):
        """Test that the commit header and message are removed."""
        show = "commit 0123abcd\nAuthor: A <a@example.com>\n\n    fix login\n\n" + MODIFY_DIFF
        self.assertEqual(extract_diff(show), MODIFY_DIFF)

    def test_commit_without_diff(self):
        """Test that an empty commit has an empty diff."""
        self.assertEqual(extract_diff("commit 0123abcd\n\n    empty commit\n"), "")

    def test_message_mentioning_diff_is_ignored(self):
        """Test that an indented message line is not mistaken for the diff start."""
        show = "commit 0123abcd\n\n    diff --git is how we got here\n\n" + MODIFY_DIFF
        self.assertEqual(extract_diff(show), MODIFY_DIFF)


if __name__ == "__main__":
    unittest.main()
