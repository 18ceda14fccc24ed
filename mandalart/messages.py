"""Localized user-facing strings."""

DEFAULT_LOCALE = "en"

MESSAGES = {
    "en": {
        "questions_failed": "Could not generate questions. Please try again.",
        "generation_failed": "Could not create the Mandalart. Please try again later.",
        "answers_required": "Please answer every question to get the best result.",
        "save_failed": "The plan was created but could not be saved to your history.",
        "update_failed": "Could not save your progress. The change was undone.",
        "export_failed": "Could not generate the image. Please try again.",
        "busy": "A request is already in progress.",
        "invalid_password": "Invalid password.",
        "not_authenticated": "Not authenticated.",
        "checklist": ["Plan", "Execute", "Review"],
        "context_question": "Q",
        "context_answer": "A",
        "grid_subtitle": "Mandalart Action Plan",
    },
    "pt-BR": {
        "questions_failed": "Erro ao gerar perguntas. Tente novamente.",
        "generation_failed": "Erro ao criar o Mandalart. Tente novamente mais tarde.",
        "answers_required": "Por favor, responda todas as perguntas para obter o melhor resultado.",
        "save_failed": "O plano foi criado, mas não pôde ser salvo no histórico.",
        "update_failed": "Não foi possível salvar seu progresso. A alteração foi desfeita.",
        "export_failed": "Não foi possível gerar a imagem. Tente novamente.",
        "busy": "Já existe uma solicitação em andamento.",
        "invalid_password": "Senha inválida.",
        "not_authenticated": "Não autenticado.",
        "checklist": ["Planejar", "Executar", "Revisar"],
        "context_question": "P",
        "context_answer": "R",
        "grid_subtitle": "Plano de Ação Mandalart",
    },
}

SUPPORTED_LOCALES = tuple(MESSAGES)


def resolve_locale(locale: str) -> str:
    """Map a requested locale onto a supported one, defaulting to English."""
    if not locale:
        return DEFAULT_LOCALE
    if locale in MESSAGES:
        return locale
    # "pt" / "pt_BR" style values
    normalized = locale.replace("_", "-")
    for supported in SUPPORTED_LOCALES:
        if supported.lower() == normalized.lower():
            return supported
    language = normalized.split("-")[0].lower()
    for supported in SUPPORTED_LOCALES:
        if supported.split("-")[0].lower() == language:
            return supported
    return DEFAULT_LOCALE


def get_message(key: str, locale: str = DEFAULT_LOCALE):
    """Look up a message, falling back to English for missing keys."""
    table = MESSAGES[resolve_locale(locale)]
    if key in table:
        return table[key]
    return MESSAGES[DEFAULT_LOCALE][key]


def default_checklist_steps(locale: str = DEFAULT_LOCALE) -> list[str]:
    """The three default checklist steps for a task."""
    return list(get_message("checklist", locale))
