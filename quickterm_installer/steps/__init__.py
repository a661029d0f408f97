from .step_10_resolve_theme import ResolveThemeStep
from .step_20_install_prompt import InstallPromptStep
from .step_30_install_fzf import InstallFzfStep
from .step_40_install_psfzf import InstallPSFzfStep
from .step_50_install_font import InstallFontStep
from .step_60_configure_terminal import ConfigureTerminalStep
from .step_70_configure_editors import ConfigureEditorsStep
from .step_80_generate_profile import GenerateProfileStep
from .step_90_verify import VerifyStep

__all__ = [
    "ResolveThemeStep",
    "InstallPromptStep",
    "InstallFzfStep",
    "InstallPSFzfStep",
    "InstallFontStep",
    "ConfigureTerminalStep",
    "ConfigureEditorsStep",
    "GenerateProfileStep",
    "VerifyStep",
]
