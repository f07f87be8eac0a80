"""Seven-sheet customs (CEISA) manifest workbooks: read, link, enrich, write."""
