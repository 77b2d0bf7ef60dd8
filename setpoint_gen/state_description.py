"""Names under which the setpoint state is exchanged with the host."""

SET_POINT = "SetPoint"
SET_POINT_CHANGE_RATE_PER_STEP = "SetPointChangeRatePerStep"
SET_POINT_CURRENT_STEPS = "SetPointCurrentSteps"
SET_POINT_LAST_SEQUENCE_STEPS = "SetPointLastSequenceSteps"


class SetPointStateDescription:
    """Ordered list of the four state variables of the setpoint driver."""

    SET_POINT = SET_POINT
    SET_POINT_CHANGE_RATE_PER_STEP = SET_POINT_CHANGE_RATE_PER_STEP
    SET_POINT_CURRENT_STEPS = SET_POINT_CURRENT_STEPS
    SET_POINT_LAST_SEQUENCE_STEPS = SET_POINT_LAST_SEQUENCE_STEPS

    def __init__(self) -> None:
        self._names = [
            SET_POINT,
            SET_POINT_CHANGE_RATE_PER_STEP,
            SET_POINT_CURRENT_STEPS,
            SET_POINT_LAST_SEQUENCE_STEPS,
        ]

    def var_names(self) -> list[str]:
        return list(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)
