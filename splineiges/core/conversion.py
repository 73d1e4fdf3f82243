import logging
import os
import typing

import numpy as np

from splineiges import IGESShapeError
from splineiges.core.spline_surface import SplineSurface
from splineiges.iges.global_params import GlobalParams
from splineiges.iges.iges_generator import IGESGenerator
from splineiges.utils.settings import get_setting

logger = logging.getLogger(__name__)


def spline_to_iges(iges_file_name: str, product_id: str, file_name: str, label_prefix: str or None,
                   *surfaces: SplineSurface, units: int or str or None = None,
                   units_name: str or None = None) -> str:
    """
    Writes one or more spline surfaces to an IGES file, one B-spline surface entity per surface. The line width and
    resolution written to the global section are derived from the bounding box of all the real-world control points.

    Parameters
    ==========
    iges_file_name: str
        File to write. The ".igs" extension is added if the name does not end in ".igs" or ".iges".

    product_id: str
        Product identification to include inside the IGES file

    file_name: str
        File name to include inside the IGES file. Also used as the start section text.

    label_prefix: str or None
        Prefix of the entity labels. With ``"part"``, successive surfaces are labeled ``part0``, ``part1``, etc.
        Labels are limited to 8 characters. Defaults to the ``label_prefix`` setting.

    surfaces: SplineSurface
        Surfaces to write, in order

    units: int or str or None
        Units flag or units keyword. Defaults to the ``units`` setting.

    units_name: str or None
        Units name, required only for the unspecified units flag

    Returns
    =======
    str
        The IGES data in Python string format
    """
    if len(surfaces) == 0:
        raise IGESShapeError("At least one spline surface is required to write an IGES file", field="surfaces",
                             value=0)
    logger.info(f"Creating IGES file: {iges_file_name}")
    label_prefix = get_setting("label_prefix") if label_prefix is None else label_prefix
    units = get_setting("units") if units is None else units

    lo = np.min([s.rw_bbox()[0] for s in surfaces], axis=0)
    hi = np.max([s.rw_bbox()[1] for s in surfaces], axis=0)
    _, max_span = SplineSurface.span_from_bbox(lo, hi)

    global_params = GlobalParams(
        product_id=product_id,
        file_name=file_name,
        units=units,
        units_name=units_name,
        line_weight_gradations=get_setting("line_weight_gradations"),
        max_line_width=get_setting("line_width_factor") * max_span,
        min_resolution=get_setting("resolution_factor") * max_span,
        max_coordinate=0.0,
    )
    entities = [surface.to_iges_entity(label=f"{label_prefix}{idx}") for idx, surface in enumerate(surfaces)]
    iges_generator = IGESGenerator(entities=entities, global_params=global_params, start_text=file_name)
    return iges_generator.generate(iges_file_name)


def spline_file_to_iges(iges_file_name: str, product_id: str, file_name: str, label_prefix: str or None,
                        *spline_file_names: str, **kwargs) -> str:
    """
    Same as ``spline_to_iges``, but reads the surfaces from JSON spline surface files (see ``SplineSurface.save``).
    Keyword arguments are passed to ``spline_to_iges``.
    """
    surfaces = [SplineSurface.load(spline_file_name) for spline_file_name in spline_file_names]
    return spline_to_iges(iges_file_name, product_id, file_name, label_prefix, *surfaces, **kwargs)


def find_part_files(directory: str, file_name_pattern: str, first_index: int = 0) -> typing.List[str]:
    """
    Collects the files ``file_name_pattern.format(index)`` in ``directory`` for ``index = first_index,
    first_index + 1, ...``, stopping at the first index whose file does not exist.
    """
    file_names = []
    index = first_index
    while True:
        candidate = os.path.join(directory, file_name_pattern.format(index))
        if not os.path.isfile(candidate):
            break
        file_names.append(candidate)
        index += 1
    return file_names


def spline_part_to_iges(iges_file_name: str, product_id: str, file_name: str, label_prefix: str or None,
                        directory: str, file_name_pattern: str, first_index: int = 0, **kwargs) -> str or None:
    """
    Writes a numbered series of spline surface files (for example, the parts of a fault surface) to a single IGES
    file.

    Parameters
    ==========
    directory: str
        Directory in which to look for the spline files

    file_name_pattern: str
        Pattern for the file names, formatted with ``str.format`` and the file index, e.g. ``"part_{}.json"``

    first_index: int
        Index of the first file. Successive files are found by incrementing the index until a file is missing.

    kwargs
        Passed to ``spline_to_iges``

    Returns
    =======
    str or None
        The IGES data in Python string format, or ``None`` if no file matched the pattern (no IGES file is written)
    """
    spline_file_names = find_part_files(directory, file_name_pattern, first_index)
    if len(spline_file_names) == 0:
        logger.warning(f"No spline files found in {directory} matching {file_name_pattern} from index "
                       f"{first_index}; skipping IGES file {iges_file_name}")
        return None
    logger.info(f"Found {len(spline_file_names)} spline files in {directory}")
    return spline_file_to_iges(iges_file_name, product_id, file_name, label_prefix, *spline_file_names, **kwargs)
