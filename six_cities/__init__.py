"""Six Cities CLI: synthetic rental offer generation and TSV import."""
