"""Report renderers — terminal, markdown, json, yaml."""
