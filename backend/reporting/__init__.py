"""Report filling: draw plan, PDF overlay, radar chart, chart fetch."""
