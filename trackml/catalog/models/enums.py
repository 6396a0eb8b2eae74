"""Shared enumerations used across the catalog client."""

from __future__ import annotations

from enum import StrEnum

# -- Model entry -------------------------------------------------------------


class ModelType(StrEnum):
    """Fixed catalogue of model categories accepted by the backend."""

    AUDIO = "Audio"
    CHATBOT = "Chatbot"
    CLASSIFICATION = "Classification"
    CLUSTERING = "Clustering"
    CODE_ASSISTANT = "CodeAssistant"
    DATA_ANALYSIS = "DataAnalysis"
    DIFFUSION = "Diffusion"
    FORECASTING = "Forecasting"
    IMAGE_EDITING = "ImageEditing"
    LLM = "LLM"
    LANGUAGE_MODEL = "LanguageModel"
    MACHINE_TRANSLATION = "MachineTranslation"
    MULTI_MODAL = "MultiModal"
    NER = "NER"
    OBJECT_DETECTION = "ObjectDetection"
    OTHER = "Other"
    RECOMMENDATION = "Recommendation"
    REINFORCEMENT = "Reinforcement"
    SEGMENTATION = "Segmentation"
    SENTIMENT_ANALYSIS = "SentimentAnalysis"
    TEXT_GENERATION = "TextGeneration"
    TIME_SERIES = "TimeSeries"
    VISION = "Vision"
    VOICE_GENERATION = "VoiceGeneration"


class ModelStatus(StrEnum):
    TRIED = "Tried"
    STUDYING = "Studying"
    WISHLIST = "Wishlist"
    ARCHIVED = "Archived"


# -- Views -------------------------------------------------------------------


class CreateFlowState(StrEnum):
    """States of the "add model" modal."""

    IDLE = "idle"
    EDITING = "editing"
    SUBMITTING = "submitting"
