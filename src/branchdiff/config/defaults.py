"""Default configuration values and starter .branchdiff.toml template."""

DEFAULT_TOML = """\
# branchdiff configuration
version = "1.0"

[compare]
base = "main"             # branch to compare against when --base is omitted
max_commits = 20          # commits listed in the history section
max_files_analyzed = 0    # 0 = every changed file gets a detailed section
# max_diff_bytes = 5242880   # per-file diff size limit for move detection
detect_moves = true

[output]
format = "terminal"       # terminal | markdown | json | yaml
show_diff = true
show_summary = true
show_legend = true

[ignore]
# files = ["*.lock", "dist/*", "docs/*"]
"""
