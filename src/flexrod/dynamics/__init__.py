from .properties import ElasticProperties, MATERIAL_PRESETS, get_preset
from .constraints import apply_soft_length, apply_bend_limit, apply_max_stretch
from .rod import Rod, RodState, step_once
from .drivers import HandleDriver, StaticHandle, SwingHandle, FunctionHandle
