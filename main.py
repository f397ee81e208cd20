import logging

import hydra
from omegaconf import DictConfig, OmegaConf

from phantom.plot import compare_phantoms, save_phantom, show_phantom
from phantom.presets import preset
from phantom.project import render
from phantom.shape import shape_from_config

log = logging.getLogger(__name__)


def build_phantom(cfg: DictConfig, mode=None):
    """Render the phantom described by the ``phantom`` section of the config."""
    nx = cfg["phantom"]["nx"]
    ny = cfg["phantom"]["ny"]
    name = cfg["phantom"]["preset"]
    mode = mode or cfg["render"]["mode"]

    if name == "custom":
        shapes = [shape_from_config(s) for s in cfg["phantom"]["shapes"]]
        log.info("Rendering %d custom shapes", len(shapes))
        return render(shapes, nx, ny, mode)

    return preset(name, nx, ny, mode)


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig):
    print(OmegaConf.to_yaml(cfg))

    # --------------------------------------------------------
    # Render phantom
    # --------------------------------------------------------
    ph = build_phantom(cfg)
    low, high = ph.extrema()
    log.info("Phantom %dx%d, dynamic range [%g, %g]", ph.nx, ph.ny, low, high)

    # --------------------------------------------------------
    # Write and display
    # --------------------------------------------------------
    if cfg["output"]["path"]:
        save_phantom(ph, cfg["output"]["path"], normalize=cfg["output"]["normalize"])

    if cfg["output"]["compare_modes"]:
        other_mode = "parallel" if cfg["render"]["mode"] == "sequential" else "sequential"
        other = build_phantom(cfg, mode=other_mode)
        compare_phantoms(ph, other, titles=(cfg["render"]["mode"], other_mode))

    if cfg["output"]["show"]:
        show_phantom(ph, title=f"{cfg['phantom']['preset']} phantom")

    return ph


if __name__ == "__main__":
    main()
