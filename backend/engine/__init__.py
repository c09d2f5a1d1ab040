"""Layout engine: text flow, bullet lists, band ranking and chart series."""
