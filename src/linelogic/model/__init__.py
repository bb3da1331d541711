"""
The MODEL layer contains pure data structures and the engine contract.
It has NO knowledge of the GUI (Qt).
It deals with cells, goals, the clipboard and change tracking.
"""
