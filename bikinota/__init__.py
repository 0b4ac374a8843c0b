"""Browser-based invoicing on top of the bikinota REST backend."""
