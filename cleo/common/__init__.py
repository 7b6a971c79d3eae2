"""Cross-cutting helpers: settings, logging, security, mail delivery and schema DDL."""
