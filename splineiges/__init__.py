r"""
Welcome
=======
To the documentation page for splineiges, a Python 3 package for writing B-spline surfaces to the Initial Graphics
Exchange Specification (IGES) format. The files produced are plain 80-column ASCII files containing one rational
B-spline surface entity (type 128) per surface, readable by CAD packages and mesh generators.


Motivation
==========
Surfaces fitted to scattered data (for example, fault or interface surfaces fitted with tensor-product B-splines) are
most useful once they can be handed to third-party meshing tools. IGES is the lowest common denominator for this, but
the format is unforgiving: every record is exactly 80 characters, fields may never be split between records, every
section carries its own sequence numbers, and the directory and parameter sections point at each other. `splineiges`
takes care of all of that bookkeeping.


Structure
=========
The package is organized from the bottom up:

- ``splineiges.iges.iges_param``: typed IGES field values (integers, reals, Hollerith strings, pointers, ...)
- ``splineiges.iges.param_list``: ordered lists of field values and their builders
- ``splineiges.iges.card``: the 80-column records of each section
- ``splineiges.iges.section``: packing of parameter lists into cards and sequence numbering
- ``splineiges.iges.iges_generator``: the five-section IGES file
- ``splineiges.core``: the spline surface container and one-call conversion helpers


Version Notes
=============

1.0.0
-----
- Initial release: B-spline surface (entity 128) output, JSON spline surface files, batch conversion helpers
"""
import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
SETTINGS_DIR = os.path.join(BASE_DIR, "settings")
EXAMPLES_DIR = os.path.join(BASE_DIR, "examples")
TEST_DIR = os.path.join(BASE_DIR, "tests")


class IGESError(Exception):
    """
    Base class for every error raised while building an IGES file. ``field`` names the offending field (or array
    element) and ``value`` holds the offending value, when these are known.
    """
    def __init__(self, message: str, field: str or None = None, value=None):
        super().__init__(message)
        self.field = field
        self.value = value


class IGESRangeError(IGESError, ValueError):
    pass


class IGESShapeError(IGESError, ValueError):
    pass


class IGESOrderError(IGESError, ValueError):
    pass


class IGESWeightError(IGESError, ValueError):
    pass


class IGESConversionError(IGESError, TypeError):
    pass


class IGESEnumerationError(IGESError, ValueError):
    pass


class FieldTooWideError(IGESError, ValueError):
    pass


class EmptySectionError(IGESError, ValueError):
    pass


class CardLengthError(IGESError, RuntimeError):
    """Raised when a record or fixed-width field comes out at the wrong width. Indicates a bug, not bad input."""
    pass


class SplineSurfaceError(IGESError, ValueError):
    pass
