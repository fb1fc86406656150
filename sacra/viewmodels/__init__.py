"""ViewModel package for screen state and selectors.

Call context:
    ``sacra/app/screen_controller.py`` owns one instance of each view model
    per hosted screen; rendering code only reads their selectors.

Dependencies:
    Modules in this package depend on domain types only. Data fetching and
    mutation transport remain in adapters.

Responsibilities:
    - Track open overlays and the record or identifier in focus.
    - Track busy state per loading scope with symmetric begin/end bookkeeping.
    - Hold typed screen settings.
"""
