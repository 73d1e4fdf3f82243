import logging
import os

from splineiges import EXAMPLES_DIR
from splineiges.core.conversion import spline_part_to_iges
from splineiges.utils.settings import get_setting


def main():
    logging.basicConfig(level=get_setting("log_level"), format="%(asctime)s - %(levelname)s - %(message)s")
    spline_part_to_iges("fault_surface.igs", "Fault surface", "fault_surface.igs", "FLT",
                        directory=os.path.join(EXAMPLES_DIR, "data"), file_name_pattern="fault_part_{}.json",
                        first_index=0)


if __name__ == "__main__":
    main()
