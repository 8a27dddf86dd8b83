# coding: utf-8

"""
License is based on Creative Commons: Attribution-NonCommercial 4.0 International (CC BY-NC 4.0) (pls. check: http://creativecommons.org/licenses/by-nc/4.0/)
"""

class ResultCollection (object):
    def __init__(self, pipelineName, plannerId, request, response, runId, duration):
        self.pipelineName = pipelineName
        self.plannerId = plannerId
        self.request = request
        self.response = response
        self.runId = runId
        self.duration = duration
