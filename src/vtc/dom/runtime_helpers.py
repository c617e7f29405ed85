from vtc.runtime_helpers import RuntimeHelper

V_MODEL_RADIO = RuntimeHelper("vModelRadio")
V_MODEL_CHECKBOX = RuntimeHelper("vModelCheckbox")
V_MODEL_TEXT = RuntimeHelper("vModelText")
V_MODEL_SELECT = RuntimeHelper("vModelSelect")
V_MODEL_DYNAMIC = RuntimeHelper("vModelDynamic")
V_ON_WITH_MODIFIERS = RuntimeHelper("withModifiers")
V_ON_WITH_KEYS = RuntimeHelper("withKeys")
V_SHOW = RuntimeHelper("vShow")
