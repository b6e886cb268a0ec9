"""Browse a static catalogue of tutorials over HTTP."""
