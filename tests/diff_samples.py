"""Unified diff fixtures shared by the test modules."""

MODIFIED_DIFF = """diff --git a/src/app.py b/src/app.py
index 83db48f..bf269f4 100644
--- a/src/app.py
+++ b/src/app.py
@@ -10,3 +10,4 @@ def main():
 setup()
-run()
+run(fast=True)
+report()
 teardown()
"""

ADDED_DIFF = """diff --git a/docs/notes.md b/docs/notes.md
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/docs/notes.md
@@ -0,0 +1,2 @@
+# Notes
+first entry
"""

DELETED_DIFF = """diff --git a/old.txt b/old.txt
deleted file mode 100644
index e69de29..0000000
--- a/old.txt
+++ /dev/null
@@ -1,2 +0,0 @@
-alpha
-beta
"""

RENAMED_DIFF = """diff --git a/lib/util.js b/lib/helpers.js
similarity index 92%
rename from lib/util.js
rename to lib/helpers.js
index 1111111..2222222 100644
--- a/lib/util.js
+++ b/lib/helpers.js
@@ -1,3 +1,3 @@
 export function a() {}
-export function b() {}
+export function c() {}
 export function d() {}
"""

BINARY_DIFF = """diff --git a/logo.png b/logo.png
index 3333333..4444444 100644
Binary files a/logo.png and b/logo.png differ
"""

NO_NEWLINE_DIFF = """diff --git a/x.txt b/x.txt
index 5555555..6666666 100644
--- a/x.txt
+++ b/x.txt
@@ -1 +1 @@
-a
\\ No newline at end of file
+b
\\ No newline at end of file
"""
