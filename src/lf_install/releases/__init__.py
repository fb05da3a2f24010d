"""Release host access: index model, client, verified download and sources.

The source adapters live in their own modules (``exact_version``,
``latest_version``, ``versions``) and are re-exported from the top-level
package; this module only exposes the index model.
"""

from .index import Build, ProductVersion, ReleaseIndex, parse_release_index

__all__ = ["Build", "ProductVersion", "ReleaseIndex", "parse_release_index"]
