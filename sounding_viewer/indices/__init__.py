"""
Sounding indices.

Modules
-------
thermodynamic
    CAPE/CIN/LFC/EL, lifted and Showalter indices, most unstable parcel,
    precipitable water and the closed-form stability indices
kinematic
    Bulk shear, mean wind, Bunkers storm motion and storm-relative helicity
composite
    Effective inflow layer, EHI, SWEAT and SCP
engine
    The index battery with per-index failure isolation
"""

from sounding_viewer.indices.thermodynamic import (
    CapeResult,
    compute_cape,
    compute_max_updraft,
    compute_lifted_index,
    compute_showalter,
    compute_most_unstable,
    compute_pw,
    compute_k,
    compute_tt,
    compute_vt,
    compute_ct,
    compute_soaring,
    compute_boyden,
    compute_mji,
    compute_rackliff,
    compute_thompson,
    compute_modified_k,
    compute_modified_tt,
    compute_cii,
    compute_fsi,
    compute_dci,
    compute_ko,
    compute_pii,
    compute_humidity_index,
)
from sounding_viewer.indices.kinematic import (
    compute_shear,
    compute_mean_wind,
    compute_stm,
    compute_sreh,
)
from sounding_viewer.indices.composite import (
    InflowLayer,
    compute_inflow_layers,
    compute_inflow_layer,
    compute_ehi,
    compute_sweat,
    compute_scp,
)
from sounding_viewer.indices.engine import (
    INDEX_KEYS,
    IndexDefinition,
    IndexEngine,
    IndexReport,
    IndexValue,
    ProfileAccessors,
)

__all__ = [
    # Thermodynamic
    "CapeResult",
    "compute_cape",
    "compute_max_updraft",
    "compute_lifted_index",
    "compute_showalter",
    "compute_most_unstable",
    "compute_pw",
    "compute_k",
    "compute_tt",
    "compute_vt",
    "compute_ct",
    "compute_soaring",
    "compute_boyden",
    "compute_mji",
    "compute_rackliff",
    "compute_thompson",
    "compute_modified_k",
    "compute_modified_tt",
    "compute_cii",
    "compute_fsi",
    "compute_dci",
    "compute_ko",
    "compute_pii",
    "compute_humidity_index",
    # Kinematic
    "compute_shear",
    "compute_mean_wind",
    "compute_stm",
    "compute_sreh",
    # Composite
    "InflowLayer",
    "compute_inflow_layers",
    "compute_inflow_layer",
    "compute_ehi",
    "compute_sweat",
    "compute_scp",
    # Engine
    "INDEX_KEYS",
    "IndexDefinition",
    "IndexEngine",
    "IndexReport",
    "IndexValue",
    "ProfileAccessors",
]
