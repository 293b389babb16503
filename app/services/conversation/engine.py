import logging
from typing import Awaitable, Callable, Dict, List, NamedTuple, Optional

from app.models.session import (
    ClientStatus,
    ConversationState,
    FreeformTopic,
    InboundEvent,
    Session,
    FIELD_CITY,
    FIELD_CLASS_MODE,
    FIELD_EMAIL,
    FIELD_NAME,
    FIELD_PHONE,
    FIELD_STATUS,
)
from app.services.conversation import catalog
from app.services.conversation.contact_extractor import ContactExtractor
from app.services.conversation.session_store import SessionStore
from app.services.intent_detection.detector import Intent, KeywordIntentDetector
from app.services.notifications import LeadKind, LeadNotification, TeamNotifier
from app.shared.whatsapp import WhatsAppButtons, OutboundMessage

logger = logging.getLogger(__name__)

FIELD_LOCATION = "location"

Predicate = Callable[[Session, InboundEvent], bool]
Action = Callable[[Session, InboundEvent], Awaitable[List[OutboundMessage]]]


class Transition(NamedTuple):
    label: str
    predicate: Predicate
    action: Action


def _matches_any(event: InboundEvent, keywords, selection_id: Optional[str] = None) -> bool:
    if selection_id and event.normalized_selection == selection_id:
        return True
    text = event.normalized_text
    return any(keyword in text for keyword in keywords)


def is_greeting(session: Session, event: InboundEvent) -> bool:
    return event.normalized_text.strip(" !.") in catalog.GREETING_WORDS


def is_yes(session: Session, event: InboundEvent) -> bool:
    return event.normalized_text == "yes" or event.normalized_selection == WhatsAppButtons.YES_ID


def is_no(session: Session, event: InboundEvent) -> bool:
    return event.normalized_text == "no" or event.normalized_selection == WhatsAppButtons.NO_ID


def has_contact_details(session: Session, event: InboundEvent) -> bool:
    is_valid, _, _ = ContactExtractor.validate(event.raw_text)
    return is_valid


def has_content(session: Session, event: InboundEvent) -> bool:
    # Un toque en los botones Yes/No de un recordatorio no es contenido
    if event.normalized_selection in (WhatsAppButtons.YES_ID, WhatsAppButtons.NO_ID):
        return False
    return bool(event.raw_text)


def wants_demo(session: Session, event: InboundEvent) -> bool:
    return _matches_any(event, ("demo",), catalog.BOOK_DEMO_ID)


def _state_name(state) -> str:
    return getattr(state, "value", str(state))


class ConversationEngine:
    """
    Responsabilidad única: aplicar un paso de la máquina de estados por evento.

    La máquina es una tabla ``estado -> [Transition]``. Las transiciones de
    un estado se evalúan en orden y se ejecuta la primera cuyo predicado
    coincide; si ninguna coincide se ejecuta el fallback del estado, que
    vuelve a mostrar el menú sin cambiar de estado. Un estado que no está en
    la tabla se trata como dato corrupto y se reinicia al menú principal.

    Los envíos y avisos al equipo que fallan se registran y se ignoran: la
    transición ya decidida nunca se revierte.
    """

    def __init__(self, store: SessionStore, whatsapp_client, notifier: TeamNotifier,
                 intent_detector: Optional[KeywordIntentDetector] = None):
        self.store = store
        self.whatsapp_client = whatsapp_client
        self.notifier = notifier
        self.intent_detector = intent_detector if intent_detector is not None else KeywordIntentDetector()
        self.transitions: Dict[ConversationState, List[Transition]] = self._build_transitions()
        self.fallbacks: Dict[ConversationState, Action] = {
            ConversationState.GREETING: self._retry_greeting,
            ConversationState.COLLECTING_CONTACT_INFO: self._retry_contact_info,
            ConversationState.CONFIRMING_CLIENT_STATUS: self._retry_client_status,
            ConversationState.SELECTING_LOCATION: self._retry_location,
            ConversationState.SELECTING_CLASS_MODE: self._retry_class_mode,
            ConversationState.MAIN_MENU: self._retry_main_menu,
            ConversationState.COLLECTING_FREEFORM_INPUT: self._retry_freeform,
            ConversationState.AWAITING_CONTINUE: self._retry_continue,
            ConversationState.AWAITING_CONTINUE_AFTER_INFO: self._retry_continue,
        }

    def _build_transitions(self) -> Dict[ConversationState, List[Transition]]:
        locations = [
            Transition(
                loc_id,
                lambda s, e, loc_id=loc_id: _matches_any(e, catalog.location_keywords(loc_id), loc_id),
                lambda s, e, loc_id=loc_id: self._select_location(s, e, loc_id),
            )
            for loc_id in catalog.location_ids()
        ]
        locations.append(Transition(
            catalog.OTHER_LOCATION_ID,
            lambda s, e: _matches_any(e, catalog.location_keywords(catalog.OTHER_LOCATION_ID), catalog.OTHER_LOCATION_ID),
            self._select_other_location,
        ))

        intent_actions = {
            Intent.SCHEDULE: self._answer_schedule,
            Intent.FEES: self._answer_fees,
            Intent.JOIN: self._request_registration,
            Intent.CALLBACK: self._request_callback,
            Intent.REFERRAL: self._open_freeform(FreeformTopic.REFERRAL),
            Intent.CONCERN: self._open_freeform(FreeformTopic.CONCERN),
            Intent.FEEDBACK: self._open_freeform(FreeformTopic.FEEDBACK),
        }
        main_menu = [
            Transition(
                intent.name.lower(),
                lambda s, e, intent=intent: self.intent_detector.detect_intent(
                    e.normalized_text, e.normalized_selection) == intent,
                action,
            )
            for intent, action in intent_actions.items()
        ]

        continue_rows = [
            Transition("yes", is_yes, self._back_to_main_menu),
            Transition("no", is_no, self._say_goodbye),
        ]
        continue_after_info_rows = continue_rows + [
            Transition("book_demo", wants_demo, self._book_demo),
        ]

        return {
            ConversationState.GREETING: [
                Transition("greeting", is_greeting, self._ask_contact_info),
            ],
            ConversationState.COLLECTING_CONTACT_INFO: [
                Transition("contact_info", has_contact_details, self._store_contact_info),
            ],
            ConversationState.CONFIRMING_CLIENT_STATUS: [
                Transition(
                    "new_client",
                    lambda s, e: _matches_any(e, ("new",), catalog.NEW_CLIENT_ID),
                    lambda s, e: self._set_client_status(s, e, ClientStatus.NEW),
                ),
                Transition(
                    "existing_client",
                    lambda s, e: _matches_any(e, ("existing",), catalog.EXISTING_CLIENT_ID),
                    lambda s, e: self._set_client_status(s, e, ClientStatus.EXISTING),
                ),
            ],
            ConversationState.SELECTING_LOCATION: locations,
            ConversationState.SELECTING_CLASS_MODE: [
                Transition(
                    "personal",
                    lambda s, e: _matches_any(e, catalog.class_mode_keywords(catalog.MODE_PERSONAL_ID), catalog.MODE_PERSONAL_ID),
                    self._choose_personal_session,
                ),
                Transition(
                    "studio",
                    lambda s, e: _matches_any(e, catalog.class_mode_keywords(catalog.MODE_STUDIO_ID), catalog.MODE_STUDIO_ID),
                    self._choose_studio_batch,
                ),
            ],
            ConversationState.MAIN_MENU: main_menu,
            ConversationState.COLLECTING_FREEFORM_INPUT: [
                Transition("freeform", has_content, self._submit_freeform),
            ],
            ConversationState.AWAITING_CONTINUE: continue_rows,
            ConversationState.AWAITING_CONTINUE_AFTER_INFO: continue_after_info_rows,
        }

    # ======================================================================
    # PASO PRINCIPAL
    # ======================================================================

    async def step(self, session: Session, event: InboundEvent) -> Session:
        """
        Aplica un paso de la máquina de estados, envía los mensajes resultantes
        y persiste (o elimina) la sesión.

        Args:
            session: Sesión actual del usuario
            event: Evento entrante normalizado

        Returns:
            Session: La sesión actualizada
        """
        self.log_step(session, event)
        rows = self.transitions.get(session.state)

        if rows is None:
            logger.warning(f"[ENGINE] Estado desconocido '{session.state}' para {session.conversation_id}, reiniciando")
            messages = await self._reset_to_main_menu(session, event)
        else:
            transition = next((row for row in rows if row.predicate(session, event)), None)
            if transition is not None:
                logger.info(f"[ENGINE] {session.conversation_id}: {_state_name(session.state)} --{transition.label}-->")
                messages = await transition.action(session, event)
            else:
                messages = await self.fallbacks[session.state](session, event)

        for content in messages:
            await self._dispatch(session.conversation_id, content)

        if session.state == ConversationState.TERMINATED:
            self.store.delete(session.conversation_id)
        else:
            self.store.put(session.conversation_id, session)

        logger.info(f"[ENGINE] {session.conversation_id} ahora en '{_state_name(session.state)}'")
        return session

    def log_step(self, session: Session, event: InboundEvent) -> None:
        """Utilidad para logging consistente entre pasos."""
        logger.info(f"[ENGINE] Paso '{_state_name(session.state)}' - Contacto: {session.conversation_id}")
        logger.debug(f"[ENGINE] Mensaje: '{event.text}' selección: {event.selection_id}")

    # ======================================================================
    # ACCIONES
    # ======================================================================

    async def _ask_contact_info(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        session.state = ConversationState.COLLECTING_CONTACT_INFO
        return [catalog.CONTACT_REQUEST]

    async def _store_contact_info(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        _, _, details = ContactExtractor.validate(event.raw_text)
        session.set_field(FIELD_NAME, details.name)
        session.set_field(FIELD_EMAIL, details.email)
        session.set_field(FIELD_PHONE, session.conversation_id)
        session.state = ConversationState.CONFIRMING_CLIENT_STATUS
        return [catalog.thank_you(details.name), catalog.client_status_prompt()]

    async def _set_client_status(self, session: Session, event: InboundEvent, status: ClientStatus) -> List[OutboundMessage]:
        session.set_field(FIELD_STATUS, status.value)
        session.state = ConversationState.SELECTING_LOCATION
        return [catalog.location_prompt(session.get_field(FIELD_NAME), status)]

    async def _select_location(self, session: Session, event: InboundEvent, location_id: str) -> List[OutboundMessage]:
        session.set_field(FIELD_LOCATION, location_id)
        session.set_field(FIELD_CITY, catalog.location_title(location_id))

        if session.client_status == ClientStatus.NEW:
            session.state = ConversationState.SELECTING_CLASS_MODE
            return [catalog.class_mode_prompt()]

        session.state = ConversationState.MAIN_MENU
        return [self._main_menu(session)]

    async def _select_other_location(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        session.set_field(FIELD_LOCATION, catalog.OTHER_LOCATION_ID)
        session.set_field(FIELD_CITY, catalog.location_title(catalog.OTHER_LOCATION_ID))
        await self._notify(session, LeadKind.OTHER_LOCATION, event.raw_text)
        session.state = ConversationState.AWAITING_CONTINUE_AFTER_INFO
        return [catalog.OTHER_LOCATION_REPLY, catalog.continue_prompt(after_info=True)]

    async def _choose_studio_batch(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        session.set_field(FIELD_CLASS_MODE, "studio")
        session.state = ConversationState.MAIN_MENU
        return [self._main_menu(session)]

    async def _choose_personal_session(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        session.set_field(FIELD_CLASS_MODE, "personal")
        await self._notify(session, LeadKind.PERSONAL_SESSION)
        session.state = ConversationState.AWAITING_CONTINUE
        return [catalog.PERSONAL_SESSION_REPLY, catalog.continue_prompt()]

    async def _answer_schedule(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        session.state = ConversationState.AWAITING_CONTINUE_AFTER_INFO
        return [catalog.schedule_for(session.get_field(FIELD_LOCATION) or None), catalog.continue_prompt(after_info=True)]

    async def _answer_fees(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        # Las tarifas no se publican en el bot: el equipo las comparte
        await self._notify(session, LeadKind.FEE_ENQUIRY)
        session.state = ConversationState.AWAITING_CONTINUE_AFTER_INFO
        return [catalog.fees_for(session.get_field(FIELD_LOCATION) or None), catalog.continue_prompt(after_info=True)]

    async def _book_demo(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        await self._notify(session, LeadKind.DEMO_BOOKING)
        session.state = ConversationState.AWAITING_CONTINUE
        return [catalog.DEMO_BOOKING_REPLY, catalog.continue_prompt()]

    async def _request_registration(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        await self._notify(session, LeadKind.REGISTRATION)
        session.state = ConversationState.AWAITING_CONTINUE_AFTER_INFO
        return [catalog.JOIN_REPLY, catalog.continue_prompt(after_info=True)]

    async def _request_callback(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        await self._notify(session, LeadKind.CALLBACK)
        session.state = ConversationState.AWAITING_CONTINUE_AFTER_INFO
        return [catalog.CALLBACK_REPLY, catalog.continue_prompt(after_info=True)]

    def _open_freeform(self, topic: FreeformTopic) -> Action:
        async def open_freeform(session: Session, event: InboundEvent) -> List[OutboundMessage]:
            session.freeform_topic = topic
            session.state = ConversationState.COLLECTING_FREEFORM_INPUT
            return [catalog.FREEFORM_PROMPTS[topic]]
        return open_freeform

    async def _submit_freeform(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        topic = session.freeform_topic
        if topic is None:
            logger.warning(f"[ENGINE] Texto libre sin tema para {session.conversation_id}")
            return await self._reset_to_main_menu(session, event)

        content = event.raw_text
        session.set_field(topic.value, content)
        kind = {
            FreeformTopic.REFERRAL: LeadKind.REFERRAL,
            FreeformTopic.CONCERN: LeadKind.CONCERN,
            FreeformTopic.FEEDBACK: LeadKind.FEEDBACK,
        }[topic]
        await self._notify(session, kind, content)

        session.freeform_topic = None
        session.state = ConversationState.AWAITING_CONTINUE
        return [catalog.FREEFORM_THANKS[topic], catalog.continue_prompt()]

    async def _back_to_main_menu(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        session.state = ConversationState.MAIN_MENU
        return [self._main_menu(session)]

    async def _say_goodbye(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        session.state = ConversationState.TERMINATED
        return [catalog.FAREWELL]

    async def _reset_to_main_menu(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        session.freeform_topic = None
        session.state = ConversationState.MAIN_MENU
        return [self._main_menu(session)]

    # ======================================================================
    # FALLBACKS (el estado no cambia)
    # ======================================================================

    async def _retry_greeting(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        return [catalog.GREETING_RETRY]

    async def _retry_contact_info(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        return [catalog.CONTACT_ERROR]

    async def _retry_client_status(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        return [catalog.STATUS_RETRY, catalog.client_status_prompt()]

    async def _retry_location(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        return [catalog.LOCATION_RETRY, catalog.location_prompt(session.get_field(FIELD_NAME), session.client_status)]

    async def _retry_class_mode(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        return [catalog.CLASS_MODE_RETRY, catalog.class_mode_prompt()]

    async def _retry_main_menu(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        return [catalog.MAIN_MENU_RETRY, self._main_menu(session)]

    async def _retry_freeform(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        if session.freeform_topic is None:
            return await self._reset_to_main_menu(session, event)
        return [catalog.FREEFORM_RETRY[session.freeform_topic]]

    async def _retry_continue(self, session: Session, event: InboundEvent) -> List[OutboundMessage]:
        after_info = session.state == ConversationState.AWAITING_CONTINUE_AFTER_INFO
        return [catalog.CONTINUE_RETRY, catalog.continue_prompt(after_info=after_info)]

    # ======================================================================
    # UTILIDADES
    # ======================================================================

    def _main_menu(self, session: Session) -> OutboundMessage:
        return catalog.main_menu_prompt(session.get_field(FIELD_NAME), session.client_status)

    async def _dispatch(self, conversation_id: str, content: OutboundMessage) -> None:
        try:
            await self.whatsapp_client.send_message(conversation_id, content)
        except Exception as e:
            logger.error(f"[ENGINE] Error enviando mensaje a {conversation_id}: {e}")

    async def _notify(self, session: Session, kind: LeadKind, detail: Optional[str] = None) -> None:
        lead = LeadNotification(
            kind=kind,
            name=session.get_field(FIELD_NAME),
            phone=session.get_field(FIELD_PHONE, session.conversation_id),
            email=session.get_field(FIELD_EMAIL),
            city=session.get_field(FIELD_CITY),
            detail=detail,
        )
        try:
            await self.notifier.notify(lead)
        except Exception as e:
            logger.error(f"[ENGINE] Error avisando al equipo ({kind.value}) para {session.conversation_id}: {e}")
