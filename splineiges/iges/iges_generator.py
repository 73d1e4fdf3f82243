import logging
import os.path
import typing

from splineiges import IGESOrderError, IGESShapeError
from splineiges.iges import (start_section_col_width, global_section_col_width, data_section_col_width,
                             START_LETTER, GLOBAL_LETTER, DIR_ENTRY_LETTER, PARAM_DATA_LETTER, TERMINATE_LETTER)
from splineiges.iges.card import (StartCard, GlobalCard, DirectoryEntryCard1, DirectoryEntryCard2,
                                  ParameterDataCard, TerminateCard)
from splineiges.iges.entity import (Entity, DE_PARAM_COUNT, DE_STRUCTURE, DE_LINE_FONT, DE_LEVEL, DE_VIEW,
                                    DE_TRANSFORM, DE_LABEL_ASSOC, DE_STATUS_BLANK, DE_STATUS_SUBORD, DE_STATUS_USE,
                                    DE_STATUS_HIER, DE_LINE_WEIGHT, DE_COLOR, DE_FORM, DE_LABEL, DE_SUBSCRIPT)
from splineiges.iges.global_params import GlobalParams
from splineiges.iges.iges_param import IGESParam, IGESType
from splineiges.iges.param_list import IGESParamList
from splineiges.iges.section import Section, split_param_ranges
from splineiges.utils.read_write_files import write_text_file
from splineiges.utils.settings import get_setting

logger = logging.getLogger(__name__)

# Construction stages, in the only order they may happen
_STAGE_START = 0
_STAGE_GLOBAL = 1
_STAGE_ENTITIES = 2
_STAGE_TERMINATED = 3


def wrap_start_text(text: str) -> typing.List[str]:
    """Splits start section text into lines of at most 72 characters, honoring any line breaks already present"""
    lines = []
    for paragraph in text.splitlines() or [""]:
        if len(paragraph) == 0:
            lines.append("")
        for idx in range(0, len(paragraph), start_section_col_width):
            lines.append(paragraph[idx:idx + start_section_col_width])
    return lines


class IGESGenerator:
    """Generates IGES files using a list of IGES entities"""
    def __init__(self, entities: typing.List[Entity] or None = None, global_params: GlobalParams or None = None,
                 start_text: str = ""):
        """
        Parameters
        ==========
        entities: typing.List[Entity] or None
            Entities to write, in order

        global_params: GlobalParams or None
            Global section parameters. If ``None``, the parameters are built at generation time from the settings
            and the output file name.

        start_text: str
            Human-readable text for the start section. May be empty, in which case a single blank start card is
            written.
        """
        self.entities = [] if entities is None else entities
        self.global_params = global_params
        self.start_text = start_text
        self.clear()

    def clear(self):
        """Removes all cards from every section"""
        self.start_section = Section(START_LETTER)
        self.global_section = Section(GLOBAL_LETTER)
        self.dir_entry_section = Section(DIR_ENTRY_LETTER)
        self.param_data_section = Section(PARAM_DATA_LETTER)
        self.terminate_section = Section(TERMINATE_LETTER)
        self._stage = _STAGE_START

    @property
    def sections(self) -> typing.Tuple[Section, ...]:
        return (self.start_section, self.global_section, self.dir_entry_section, self.param_data_section,
                self.terminate_section)

    def _check_stage(self, operation: str, allowed: typing.Tuple[int, ...]):
        if self._stage not in allowed:
            raise IGESOrderError(f"{operation} is not allowed at this point of the file construction (stage "
                                 f"{self._stage})", field=operation, value=self._stage)

    def add_start_card(self, text: str = "", end_of_record: bool = False) -> int:
        """
        Adds one start card holding ``text`` (at most 72 characters).

        Returns
        =======
        int
            The sequence number of the new card
        """
        self._check_stage("add_start_card", (_STAGE_START,))
        return self.start_section.append_card(lambda seq: StartCard(seq, text, end_of_record))

    def add_start_section(self, text: str = "") -> int:
        """
        Adds the start section, wrapping ``text`` onto as many 72-column cards as needed.

        Returns
        =======
        int
            The sequence number of the first new card
        """
        self._check_stage("add_start_section", (_STAGE_START,))
        lines = wrap_start_text(text)
        # Build every card before appending any, so a bad character leaves the section unchanged
        first_seq = self.start_section.next_pointer()
        cards = [StartCard(first_seq + idx, line, idx == len(lines) - 1) for idx, line in enumerate(lines)]
        for card in cards:
            self.start_section.append_card(lambda seq, c=card: c)
        return first_seq

    def add_global_cards(self, global_data: IGESParamList or GlobalParams) -> int:
        """
        Adds the global section. Must follow the start section and may only be called once.

        Parameters
        ==========
        global_data: IGESParamList or GlobalParams
            The global parameters, either already assembled into a list or as a ``GlobalParams`` object

        Returns
        =======
        int
            The sequence number of the first new card
        """
        self._check_stage("add_global_cards", (_STAGE_START,))
        if len(self.start_section) == 0:
            raise IGESOrderError("The start section must be added before the global section",
                                 field="add_global_cards", value=self._stage)
        if isinstance(global_data, GlobalParams):
            global_data = global_data.write_param_list()
        first_seq = self.global_section.next_pointer()
        self.global_section.add_free_form_cards(global_data, global_section_col_width,
                                                lambda seq, params, eor: GlobalCard(seq, params, eor))
        self._stage = _STAGE_GLOBAL
        return first_seq

    def add_param_cards(self, dir_entry_data: IGESParamList, param_data: IGESParamList) -> int:
        """
        Adds the parameter data cards of one entity, followed by its two directory entry cards.

        Parameters
        ==========
        dir_entry_data: IGESParamList
            The 15 directory entry parameters, excluding the entity type, parameter data pointer, and parameter line
            count (see ``splineiges.iges.entity.dir_entry_param_list``)

        param_data: IGESParamList
            Parameter data, beginning with the entity type

        Returns
        =======
        int
            The sequence number of the first new directory entry card
        """
        self._check_stage("add_param_cards", (_STAGE_GLOBAL, _STAGE_ENTITIES))
        if len(dir_entry_data) != DE_PARAM_COUNT:
            raise IGESShapeError(f"Expected {DE_PARAM_COUNT} directory entry parameters, found "
                                 f"{len(dir_entry_data)}", field="dir_entry_data", value=len(dir_entry_data))
        de = dir_entry_data.take()
        params = param_data.take()
        ranges = list(split_param_ranges(params, data_section_col_width))

        first_de_seq = self.dir_entry_section.next_pointer()
        first_pd_seq = self.param_data_section.next_pointer()
        entity_type = params[0].as_type(IGESType.INTEGER)

        # Both directory entry cards are built up front so that nothing is appended if any field is invalid
        card1 = DirectoryEntryCard1(first_de_seq, entity_type, IGESParam(first_pd_seq, IGESType.POINTER),
                                    structure=de[DE_STRUCTURE], line_font=de[DE_LINE_FONT], level=de[DE_LEVEL],
                                    view=de[DE_VIEW], transform=de[DE_TRANSFORM], label_assoc=de[DE_LABEL_ASSOC],
                                    status_blank=de[DE_STATUS_BLANK], status_subord=de[DE_STATUS_SUBORD],
                                    status_use=de[DE_STATUS_USE], status_hier=de[DE_STATUS_HIER])
        card2 = DirectoryEntryCard2(first_de_seq + 1, entity_type, line_weight=de[DE_LINE_WEIGHT],
                                    color=de[DE_COLOR], param_line_count=IGESParam(len(ranges), IGESType.INTEGER),
                                    form=de[DE_FORM], label=de[DE_LABEL], subscript=de[DE_SUBSCRIPT])
        card1.write_card_string()
        card2.write_card_string()

        for begin, end, end_of_record in ranges:
            self.param_data_section.append_card(
                lambda seq, b=begin, e=end, eor=end_of_record: ParameterDataCard(seq, first_de_seq, params[b:e], eor))
        self.dir_entry_section.append_card(lambda seq: card1)
        self.dir_entry_section.append_card(lambda seq: card2)
        self._stage = _STAGE_ENTITIES

        logger.debug(f"Entity {entity_type.value} at D{first_de_seq}: {len(ranges)} parameter data cards from "
                     f"P{first_pd_seq}")
        return first_de_seq

    def add_entity(self, entity: Entity) -> int:
        """Adds the cards of ``entity``. The entity itself is left unchanged and can be added again."""
        return self.add_param_cards(entity.dir_entry_data.copy(), entity.parameter_data.copy())

    def add_terminate_card(self) -> int:
        """Adds the terminate card. No other card can be added afterward."""
        self._check_stage("add_terminate_card", (_STAGE_GLOBAL, _STAGE_ENTITIES))
        seq_num = self.terminate_section.append_card(lambda seq: TerminateCard(
            seq,
            last_start=self.start_section.last_pointer(),
            last_global=self.global_section.last_pointer(),
            last_dir_entry=self.dir_entry_section.last_pointer(),
            last_param_data=self.param_data_section.last_pointer(),
        ))
        self._stage = _STAGE_TERMINATED
        return seq_num

    def write_iges_string(self) -> str:
        """Concatenates the cards of every section, in section order"""
        return "".join(section.write_section_string() for section in self.sections)

    def build(self, file_name: str = "") -> str:
        """
        Rebuilds every section from the start text, the global parameters, and the entities.

        Parameters
        ==========
        file_name: str
            File name used for the global section when no ``GlobalParams`` were given

        Returns
        =======
        str
            The IGES data in Python string format
        """
        global_params = self.global_params
        if global_params is None:
            global_params = GlobalParams(product_id=get_setting("product_id"), file_name=file_name,
                                         units=get_setting("units"),
                                         line_weight_gradations=get_setting("line_weight_gradations"))
        self.clear()
        self.add_start_section(self.start_text)
        self.add_global_cards(global_params)
        for entity in self.entities:
            self.add_entity(entity)
        self.add_terminate_card()
        logger.debug("Section sizes: " + ", ".join(f"{s.letter}={len(s)}" for s in self.sections))
        return self.write_iges_string()

    def generate(self, file_name: str) -> str:
        """
        Generates an IGES file containing all the information for the entities. The file is only written once the
        whole file has been built in memory.

        Parameters
        ==========
        file_name: str
          File where the IGES data will be saved. If the file name does not end with the ".igs" or ".iges" extension,
          it will be added automatically.

        Returns
        =======
        str
          The IGES data in Python string format
        """
        # If the file name does not end in the .igs or .iges extension, add the extension:
        if os.path.splitext(file_name)[-1] not in [".igs", ".iges"]:
            file_name += ".igs"

        iges_string = self.build(os.path.basename(file_name))

        write_text_file(file_name, iges_string)
        logger.info(f"Wrote IGES file {file_name} ({len(self.entities)} entities)")
        return iges_string
