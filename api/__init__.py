"""HTTP surface: model proxy, session control and record routes."""
