"""Wire codecs for streaming steps to external renderers."""
