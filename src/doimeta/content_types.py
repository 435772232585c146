"""MIME types for the two supported metadata formats."""

__all__ = ["CSL_JSON", "UNIXREF_XML"]

CSL_JSON = "application/vnd.citationstyles.csl+json"
UNIXREF_XML = "application/vnd.crossref.unixref+xml"
