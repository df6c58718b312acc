"""rpm-md metadata extensions (patterns, susedata, repomd)."""
