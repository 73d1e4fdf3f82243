import logging
import typing

from splineiges import FieldTooWideError, IGESShapeError
from splineiges.iges import line_terminator
from splineiges.iges.card import Card
from splineiges.iges.iges_param import IGESParam
from splineiges.iges.param_list import IGESParamList

logger = logging.getLogger(__name__)


def find_range_in(params: typing.Sequence[IGESParam], begin: int, num_cols: int) -> int:
    """
    Finds the longest run of values, starting at ``begin``, that fits in ``num_cols`` columns. Each value takes the
    length of its text plus one column for the delimiter that follows it.

    Parameters
    ==========
    params: typing.Sequence[IGESParam]
        Values to pack

    begin: int
        Index of the first value of the run

    num_cols: int
        Number of columns available on the card

    Returns
    =======
    int
        Index one past the last value of the run. Equal to ``len(params)`` if all the remaining values fit.
    """
    count = len(params[begin].write_value_to_python_str()) + 1
    if count > num_cols:
        raise FieldTooWideError(f"Data item too long for {num_cols} columns: {params[begin]}",
                                field=f"params[{begin}]", value=str(params[begin]))
    end = begin + 1
    while end < len(params):
        count += len(params[end].write_value_to_python_str()) + 1
        if count > num_cols:
            break
        end += 1
    return end


def split_param_ranges(params: typing.Sequence[IGESParam], num_cols: int):
    """
    Splits a record into consecutive runs of values, one per card.

    Yields
    ======
    typing.Tuple[int, int, bool]
        Start index, end index (exclusive), and whether this run closes the record
    """
    if len(params) == 0:
        raise IGESShapeError("Cannot split an empty parameter list into cards", field="params", value=0)
    begin = 0
    while begin < len(params):
        end = find_range_in(params, begin, num_cols)
        yield begin, end, end == len(params)
        begin = end


class Section:
    """
    The cards of one IGES section, in order. Card ``i`` always carries the sequence number ``i + 1``.
    """
    def __init__(self, letter: str):
        self.letter = letter
        self.cards: typing.List[Card] = []

    def __len__(self):
        return len(self.cards)

    def next_pointer(self) -> int:
        """Sequence number that the next card appended to this section will carry"""
        return len(self.cards) + 1

    def last_pointer(self) -> int:
        """Sequence number of the last card, or 0 if the section is empty"""
        return len(self.cards)

    def append_card(self, make_card: typing.Callable[[int], Card]) -> int:
        """
        Builds a card with the next sequence number and appends it.

        Parameters
        ==========
        make_card: typing.Callable[[int], Card]
            Called with the sequence number reserved for the card. Must return a card of this section carrying that
            sequence number.

        Returns
        =======
        int
            The sequence number of the new card
        """
        seq_num = self.next_pointer()
        card = make_card(seq_num)
        if card.letter_code != self.letter or card.seq_num != seq_num:
            raise IGESShapeError(f"Section {self.letter} expected a card with sequence number {seq_num}, got "
                                 f"{card.letter_code}{card.seq_num}", field="seq_num", value=card.seq_num)
        self.cards.append(card)
        return seq_num

    def add_free_form_cards(self, param_list: IGESParamList, num_cols: int,
                            make_card: typing.Callable[[int, typing.Sequence[IGESParam], bool], Card]) -> int:
        """
        Takes a parameter list and spreads its values over as many cards as necessary, never splitting a value
        between cards.

        Parameters
        ==========
        param_list: IGESParamList
            The record to write. It is taken, so it cannot be reused afterward.

        num_cols: int
            Number of columns available for values on each card

        make_card: typing.Callable[[int, typing.Sequence[IGESParam], bool], Card]
            Called with the sequence number, the values of the card, and whether the card closes the record

        Returns
        =======
        int
            Number of cards added
        """
        params = param_list.take()
        # Pack the whole record before appending anything, so a value that is too wide leaves the section unchanged
        ranges = list(split_param_ranges(params, num_cols))
        for begin, end, end_of_record in ranges:
            self.append_card(lambda seq, b=begin, e=end, eor=end_of_record: make_card(seq, params[b:e], eor))
        logger.debug(f"Section {self.letter}: added {len(ranges)} cards for {len(params)} values")
        return len(ranges)

    def write_section_string(self) -> str:
        return "".join(f"{card.write_card_string()}{line_terminator}" for card in self.cards)
