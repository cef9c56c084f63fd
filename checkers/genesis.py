"""Loading and exporting the module's genesis state."""

from __future__ import annotations

from checkers.keeper import Keeper
from checkers.types import GenesisState, default_genesis


def init_genesis(keeper: Keeper, gen_state: GenesisState) -> None:
    """Write a genesis state into the keeper's store."""
    keeper.set_system_info(gen_state.system_info)
    for game in gen_state.stored_game_list:
        keeper.set_stored_game(game)
    keeper.set_params(gen_state.params)


def export_genesis(keeper: Keeper) -> GenesisState:
    """Read the keeper's state back as a genesis state."""
    genesis = default_genesis()
    genesis.params = keeper.get_params()
    system_info = keeper.get_system_info()
    if system_info is not None:
        genesis.system_info = system_info
    genesis.stored_game_list = keeper.all_stored_games()
    return genesis