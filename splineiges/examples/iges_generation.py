import logging

import numpy as np

from splineiges.iges.iges_generator import IGESGenerator
from splineiges.iges.global_params import GlobalParams
from splineiges.iges.surfaces import RationalBSplineSurfaceIGES
from splineiges.utils.settings import get_setting


def main():
    logging.basicConfig(level=get_setting("log_level"), format="%(asctime)s - %(levelname)s - %(message)s")
    file_name = "iges_generation_example.igs"

    # Bicubic patch over a 4 x 5 control grid, rows along v
    u, v = np.meshgrid(np.linspace(0.0, 100.0, 5), np.linspace(0.0, 60.0, 4))
    P = np.stack((u, v, 10.0 * np.sin(u / 30.0) * np.cos(v / 25.0)), axis=-1)
    knots_u = np.array([0., 0., 0., 0., 0.5, 1., 1., 1., 1.])
    knots_v = np.array([0., 0., 0., 0., 1., 1., 1., 1.])

    weights = np.ones((4, 5))
    weights[1:3, 1:4] = 0.8

    surf = RationalBSplineSurfaceIGES(knots_u, knots_v, P, degree_u=3, degree_v=3, weights=weights, label="PATCH")
    iges_generator = IGESGenerator(entities=[surf],
                                   global_params=GlobalParams(product_id="Example patch", file_name=file_name,
                                                              units="millimeters"),
                                   start_text="Example rational B-spline surface patch")
    iges_generator.generate(file_name)


if __name__ == "__main__":
    main()
