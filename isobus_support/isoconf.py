"""Configuration of the ISO 11783 protocol stack.

:class:`IsoConfig` gathers the limits and feature switches of the stack in
one immutable object.  Its defaults are the values of the sample
configuration.  Values that the stack derives from others when they are not
given (connection, auxiliary and command buffer limits) are worked out the
same way here.  A configuration is checked when it is created; an
inconsistent one raises :class:`ValueError`.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

# Self-configurable source addresses are taken from 128..247.
_SELF_CONFIG_SA_MIN = 128
_SELF_CONFIG_SA_MAX = 247

# Data buffer size of a transport channel: 9 bytes up to a full TP (1785).
_TP_BLOCK_SIZE_MIN = 9
_TP_BLOCK_SIZE_MAX = 1785


@dataclass(frozen=True)
class IsoConfig:
    """Limits and enabled parts of the protocol stack.

    ``vtc_connections_max``, ``aux_instances_max`` and
    ``vtc_cmd_instance_max`` default to ``working_sets * 2``,
    ``working_sets`` and ``vtc_cmd_buffer_max`` when left as ``None``;
    ``aux_entries_max`` defaults to
    ``aux_entries_instance_max * aux_instances_max`` when ``None``.
    """

    # Enabled parts of the stack.
    lay78: bool = True
    lay6: bool = True
    lay10: bool = False
    lay13: bool = False
    lay14: bool = False
    nmea: bool = False

    # Multi CAN node base driver.
    can_nodes: int = 1
    can_vt: int = 0

    # Part 5: network management.
    first_free_sa: int = 200
    last_free_sa: int = 220
    user_max: int = 64
    nm_loop_time_ms: int = 5

    # Part 3: transport protocol.
    tp_parallel_max: int = 10
    tp_reduced_max: int = 5
    block_size_j1939: int = 223

    # Part 7: application layer.
    number_pgn_max: int = 40
    number_spn_max: int = 60

    # Part 6: virtual terminal client.
    working_sets: int = 3
    ws_extern: int = 10
    vtc_connections_max: int | None = None
    aux_instances_max: int | None = None
    aux_entries_instance_max: int = 15
    aux_entries_max: int | None = 25
    aux_buff_preass: int = 200
    clients_time_limit: bool = True
    time_consumed_max: int = 5
    vtc_cmd_buffer_max: int = 100
    vtc_cmd_instance_max: int | None = None
    vtc_cmd_str_block_size: int = 16
    vtc_cmd_exdata_max_blocks: int = 64
    vtc_cmd_str_max_length: int = 256
    wait_vt_sec: int = 5
    vtc_max_pool_versions: int = 10
    vtc_ws_pool_buffer: int = 50
    vtc_pool_buffer_size: int = 25000
    seg_pool_block: int = 1024
    no_scaling_elements_max: int = 60
    manipulate_max_loops: int = 10
    manipulate_max_time_ms: int = 20
    pool_num_ani_copy: int = 4

    # Part 10: task controller client.
    tc_num_clients: int = 3
    process_data_max: int = 130
    device_description_size: int = 4000
    tc_num_nested_de: int = 10
    tc_time_cycle_min_pds_ms: int = 50

    # Part 13: file server client.
    fsc_max_connections: int = 2
    fsc_max_io_handles: int = 6

    # Part 14: sequence control client.
    scd_size: int = 1000
    sc_function_max: int = 10
    sc_states_max: int = 15
    sc_pool_buff_ext: int = 20

    # Diagnostics.
    debug_enabled: bool = True
    vtc_graphic_aux: bool = True

    def __post_init__(self) -> None:
        if self.vtc_connections_max is None:
            object.__setattr__(self, "vtc_connections_max", self.working_sets * 2)
        if self.aux_instances_max is None:
            object.__setattr__(self, "aux_instances_max", self.working_sets)
        if self.aux_entries_max is None:
            object.__setattr__(
                self,
                "aux_entries_max",
                self.aux_entries_instance_max * self.aux_instances_max,
            )
        if self.vtc_cmd_instance_max is None:
            object.__setattr__(self, "vtc_cmd_instance_max", self.vtc_cmd_buffer_max)
        self.validate()

    def validate(self) -> None:
        """Raise :class:`ValueError` if the settings contradict each other."""
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, bool):
                continue
            if not isinstance(value, int):
                raise ValueError(f"{item.name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{item.name} must not be negative, got {value}")

        if self.can_nodes < 1:
            raise ValueError("at least one CAN node is needed")
        if self.can_vt >= self.can_nodes:
            raise ValueError(
                f"can_vt {self.can_vt} is not one of the {self.can_nodes} CAN nodes"
            )

        if not (
            _SELF_CONFIG_SA_MIN
            <= self.first_free_sa
            <= self.last_free_sa
            <= _SELF_CONFIG_SA_MAX
        ):
            raise ValueError(
                "self-configurable addresses must satisfy "
                f"{_SELF_CONFIG_SA_MIN} <= first ({self.first_free_sa}) "
                f"<= last ({self.last_free_sa}) <= {_SELF_CONFIG_SA_MAX}"
            )
        if self.user_max < 1:
            raise ValueError("user_max must allow at least one network member")

        if self.tp_parallel_max < 1:
            raise ValueError("at least one transport channel is needed")
        if self.tp_reduced_max > self.tp_parallel_max:
            raise ValueError(
                f"tp_reduced_max {self.tp_reduced_max} exceeds "
                f"tp_parallel_max {self.tp_parallel_max}"
            )
        if not _TP_BLOCK_SIZE_MIN <= self.block_size_j1939 <= _TP_BLOCK_SIZE_MAX:
            raise ValueError(
                f"block_size_j1939 must be in {_TP_BLOCK_SIZE_MIN}.."
                f"{_TP_BLOCK_SIZE_MAX}, got {self.block_size_j1939}"
            )

        if self.lay14 and not self.lay6:
            raise ValueError("sequence control (lay14) needs the VT client (lay6)")

        if self.working_sets < 1:
            raise ValueError("at least one working set is needed")
        if self.vtc_cmd_buffer_max < 1:
            raise ValueError("the VT command buffer needs at least one entry")
        if not 1 <= self.vtc_cmd_instance_max <= self.vtc_cmd_buffer_max:
            raise ValueError(
                f"vtc_cmd_instance_max {self.vtc_cmd_instance_max} must be in "
                f"1..{self.vtc_cmd_buffer_max}"
            )
        if self.vtc_cmd_str_block_size < 1:
            raise ValueError("vtc_cmd_str_block_size must be positive")